from enum import Enum

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FetchFailurePolicy(str, Enum):
    """What a failed first fetch does to the page.

    STRICT shows the error screen. LENIENT falls back to the plain menu with
    the waiter button disabled.
    """
    STRICT = "strict"
    LENIENT = "lenient"


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="./.env",
        env_prefix="TABLE_SYNC_",
        env_ignore_empty=True,
        extra="ignore",
    )

    API_BASE_URL: str = "http://localhost:8000"
    # Derived from API_BASE_URL when left empty
    WS_URL_OVERRIDE: str = ""

    REQUEST_TIMEOUT: float = 10.0
    AUTO_RESET_SECONDS: float = 5.0
    FETCH_FAILURE_POLICY: FetchFailurePolicy = FetchFailurePolicy.STRICT

    # Where the guest-side flags live between page loads
    STATE_FILE: str = ".table_sync_state.json"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def WS_BASE_URL(self) -> str:  # noqa
        if self.WS_URL_OVERRIDE:
            return self.WS_URL_OVERRIDE.rstrip("/")
        base = self.API_BASE_URL.rstrip("/")
        if base.startswith("https://"):
            return "wss://" + base[len("https://"):]
        if base.startswith("http://"):
            return "ws://" + base[len("http://"):]
        return base

client_settings = ClientSettings()  # type: ignore
