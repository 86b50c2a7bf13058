from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value
    raise ValueError("expected a scalar value")


class PayloadModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class User(PayloadModel):
    name: Optional[str] = None
    dept: Optional[str] = None
    year: Optional[str] = None
    college_roll: Optional[str] = None
    email: Optional[str] = None
    contact_no: Optional[str] = None

    @field_validator("name", "dept", "year", "college_roll", "email", "contact_no", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return _as_text(value)


class Participant(PayloadModel):
    user: User = Field(default_factory=User, alias="user_participants")
    created_at: Optional[str] = None

    @field_validator("user", mode="before")
    @classmethod
    def default_user(cls, value):
        return {} if value is None else value

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, value):
        return _as_text(value)


class Team(PayloadModel):
    team_name: Optional[str] = None
    created_at: Optional[str] = None
    members: List[Participant] = Field(default_factory=list)

    @field_validator("team_name", "created_at", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return _as_text(value)

    @field_validator("members", mode="before")
    @classmethod
    def default_members(cls, value):
        return [] if value is None else value

    @property
    def leader(self) -> Optional[Participant]:
        return self.members[0] if self.members else None


class Event(PayloadModel):
    name: Optional[str] = None
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    venue: Optional[str] = None
    details: Optional[str] = None
    is_team: bool = False

    @field_validator("name", "date", "start_time", "end_time", "venue", "details", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return _as_text(value)

    @field_validator("is_team", mode="before")
    @classmethod
    def coerce_flag(cls, value):
        return bool(value)


class EventData(PayloadModel):
    event: Event
    participants: List[Participant] = Field(default_factory=list)
    teams: List[Team] = Field(default_factory=list)

    @field_validator("participants", "teams", mode="before")
    @classmethod
    def default_list(cls, value):
        return [] if value is None else value
