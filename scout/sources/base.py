from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from scout.config import SourceConfig


class CredentialKind(str, Enum):
    """Credential an upstream needs before a resource request."""

    NONE = "none"
    BEARER_TOKEN = "bearer_token"
    API_KEY = "api_key"


@dataclass(frozen=True)
class Source:
    """One upstream family with its ordered endpoint candidates."""

    id: str
    endpoints: tuple[str, ...]
    credential: CredentialKind = CredentialKind.NONE
    timeout_seconds: float = 10.0

    @classmethod
    def from_config(cls, source_id: str, config: SourceConfig, credential: CredentialKind) -> "Source":
        return cls(
            id=source_id,
            endpoints=tuple(config.endpoints),
            credential=credential,
            timeout_seconds=config.timeout_seconds,
        )


@dataclass(frozen=True)
class FetchRequest:
    """One query against one Source."""

    source: Source
    target: str
    sort: str = "hot"
    limit: int = 10
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Success:
    """Parsed upstream payload and the endpoint that produced it."""

    payload: Any
    endpoint: str = ""

    ok = True


@dataclass(frozen=True)
class Failure:
    """Diagnostic detail for a failed call; ``status`` is 0 when no response arrived."""

    detail: str
    endpoint: str = ""
    status: int = 0

    ok = False


FetchOutcome = Success | Failure
