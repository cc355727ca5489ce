# =============================================================================
# core/config.py  —  Process Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds the one read-only settings object the server runs with.  It is
#   created once at startup (main.py) and handed to the dispatcher, which
#   asks it for credentials on every tool call.
#
# CREDENTIALS:
#   The three Bento credentials are NOT required at startup.  A server with
#   no credentials still starts and lists its tools; each tool call then
#   fails with a message naming the missing variables.
# =============================================================================

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_API_BASE_URL = "https://app.bentonow.com/api/v1"

# Fixed order: error messages list missing names in this order.
CREDENTIAL_ENV_VARS = (
    "BENTO_PUBLISHABLE_KEY",
    "BENTO_SECRET_KEY",
    "BENTO_SITE_UUID",
)


class MissingCredentialsError(RuntimeError):
    """Raised when one or more Bento credentials are not configured."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            f"Missing required environment variables: {', '.join(missing)}"
        )


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return value.strip()


@dataclass(frozen=True)
class BentoCredentials:
    """The three values every Bento API request is signed with."""

    publishable_key: str
    secret_key: str
    site_uuid: str


@dataclass(frozen=True)
class BentoSettings:
    """Everything the server reads from the environment."""

    publishable_key: Optional[str] = None
    secret_key: Optional[str] = None
    site_uuid: Optional[str] = None
    api_base_url: str = DEFAULT_API_BASE_URL
    log_level: str = "INFO"
    server_name: str = "bento"

    @classmethod
    def from_env(cls) -> "BentoSettings":
        return cls(
            publishable_key=_env("BENTO_PUBLISHABLE_KEY"),
            secret_key=_env("BENTO_SECRET_KEY"),
            site_uuid=_env("BENTO_SITE_UUID"),
            api_base_url=_env("BENTO_API_BASE_URL", DEFAULT_API_BASE_URL),
            log_level=_env("BENTO_LOG_LEVEL", "INFO").upper(),
        )

    def missing_credentials(self) -> list[str]:
        values = (self.publishable_key, self.secret_key, self.site_uuid)
        return [name for name, value in zip(CREDENTIAL_ENV_VARS, values) if not value]

    def credentials(self) -> BentoCredentials:
        """Return the credentials, or raise MissingCredentialsError."""
        missing = self.missing_credentials()
        if missing:
            raise MissingCredentialsError(missing)
        return BentoCredentials(
            publishable_key=self.publishable_key,
            secret_key=self.secret_key,
            site_uuid=self.site_uuid,
        )
