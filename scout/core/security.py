import hmac

from scout.core.errors import AuthError, ConfigError


def verify_api_key(expected: str, provided: str | None) -> None:
    """
    Check the shared-secret header against the configured key.

    Raises:
        ConfigError: No key configured on the server
        AuthError: Header missing or different
    """
    if not expected:
        raise ConfigError("Server misconfig: PRIVATE_API_KEY missing")
    if not provided or not hmac.compare_digest(expected.encode(), provided.encode()):
        raise AuthError()
