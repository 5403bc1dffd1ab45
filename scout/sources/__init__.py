from scout.sources.base import CredentialKind, FetchOutcome, FetchRequest, Failure, Source, Success
from scout.sources.client import SourceClient
from scout.sources.fallback import FallbackChain

__all__ = [
    "CredentialKind",
    "FallbackChain",
    "Failure",
    "FetchOutcome",
    "FetchRequest",
    "Source",
    "SourceClient",
    "Success",
]
