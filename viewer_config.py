from typing import Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator

SECRETS_SECTION = "event_viewer"

DEFAULT_API_BASE_URL = "https://imeetserver2k25.onrender.com/event_details?event_id="
DEFAULT_RELAY_URL = "https://api.allorigins.win/get?url="


class ViewerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    api_base_url: str = DEFAULT_API_BASE_URL
    use_relay: bool = False
    relay_url: str = DEFAULT_RELAY_URL
    timeout: float = Field(default=15, gt=0)
    events: Dict[str, str] = Field(default_factory=dict)
    display_timezone: Optional[str] = None
    page_title: str = "Event Registration Viewer"

    @field_validator("api_base_url", "relay_url")
    @classmethod
    def require_http_url(cls, value: str) -> str:
        raw = str(value or "").strip()
        if not raw.lower().startswith(("http://", "https://")):
            raise ValueError("must be an http/https URL")
        return raw

    @field_validator("events", mode="before")
    @classmethod
    def coerce_event_ids(cls, value):
        if value is None:
            return {}
        return {str(k): str(v) for k, v in dict(value).items()}

    @field_validator("display_timezone")
    @classmethod
    def known_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value:
            try:
                ZoneInfo(value)
            except ZoneInfoNotFoundError as exc:
                raise ValueError(f"unknown timezone {value!r}") from exc
        return value or None

    @property
    def tzinfo(self) -> Optional[ZoneInfo]:
        return ZoneInfo(self.display_timezone) if self.display_timezone else None


def load_config(secrets=None) -> ViewerConfig:
    """Build the viewer settings from the `[event_viewer]` table of st.secrets."""
    section = {}
    if secrets is not None and SECRETS_SECTION in secrets:
        section = dict(secrets[SECRETS_SECTION])
    return ViewerConfig(**section)
