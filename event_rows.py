import logging
from typing import List, Literal, Optional, Union

import pandas as pd
from dateutil.parser import parse as parse_date
from pydantic import BaseModel, ValidationError

from event_errors import InvalidResponseError
from event_formatting import format_date, format_datetime, format_time_range
from event_schemas import EventData, Participant, Team

logger = logging.getLogger(__name__)

TEAM_STATUS_EMPTY = "Empty"
TEAM_STATUS_INCOMPLETE = "Incomplete"
TEAM_STATUS_COMPLETE = "Complete"

MISSING = "N/A"
UNKNOWN_EVENT = "Unknown Event"

PARTICIPANT_COLUMNS = ["#", "Name", "Department", "Year", "Roll No", "Email", "Contact", "Registered"]
TEAM_COLUMNS = ["#", "Team", "Leader", "Members", "Size", "Status", "Registered"]
SEARCH_COLUMN = "search_text"


# ============================================================
# DISPLAY ROWS
# ============================================================

class ParticipantRow(BaseModel):
    kind: Literal["participant"] = "participant"
    number: int
    name: str
    dept: str
    year: str
    roll: str
    email: str
    contact: str
    registered: str
    search_text: str

    def cells(self):
        return [self.number, self.name, self.dept, self.year, self.roll, self.email, self.contact, self.registered]


class TeamRow(BaseModel):
    kind: Literal["team"] = "team"
    number: int
    team_name: str
    leader: str
    members: List[str]
    member_count: int
    status: str
    registered: str
    search_text: str

    def cells(self):
        return [
            self.number,
            self.team_name,
            self.leader,
            ", ".join(self.members),
            self.member_count,
            self.status,
            self.registered,
        ]


DisplayRow = Union[ParticipantRow, TeamRow]


class EventCard(BaseModel):
    name: str
    date: str
    time: str
    venue: str
    description: str


class EventView(BaseModel):
    card: EventCard
    is_team: bool
    rows: List[DisplayRow]
    total: int

    @property
    def noun(self) -> str:
        return "Teams" if self.is_team else "Participants"

    @property
    def empty_message(self) -> str:
        return f"No {self.noun.lower()} registered yet"


# ============================================================
# SEARCH INDEX
# ============================================================

def build_search_text(*fields) -> str:
    return " ".join(str(f) for f in fields).lower()


def team_status(member_count: int) -> str:
    if member_count <= 0:
        return TEAM_STATUS_EMPTY
    if member_count == 1:
        return TEAM_STATUS_INCOMPLETE
    return TEAM_STATUS_COMPLETE


def _display(value) -> str:
    return value if value else MISSING


def participant_row(number: int, participant: Participant, tz=None) -> ParticipantRow:
    user = participant.user
    name = _display(user.name)
    dept = _display(user.dept)
    roll = _display(user.college_roll)
    email = _display(user.email)
    return ParticipantRow(
        number=number,
        name=name,
        dept=dept,
        year=_display(user.year),
        roll=roll,
        email=email,
        contact=_display(user.contact_no),
        registered=format_datetime(participant.created_at, tz),
        search_text=build_search_text(name, dept, roll, email),
    )


def team_row(number: int, team: Team, tz=None) -> TeamRow:
    team_name = _display(team.team_name)
    fields = [team_name]
    members = []
    for member in team.members:
        user = member.user
        name = _display(user.name)
        members.append(name)
        fields += [name, _display(user.email), _display(user.dept), _display(user.college_roll)]

    leader = team.leader
    return TeamRow(
        number=number,
        team_name=team_name,
        leader=_display(leader.user.name) if leader else MISSING,
        members=members,
        member_count=len(members),
        status=team_status(len(members)),
        registered=format_datetime(team.created_at, tz),
        search_text=build_search_text(*fields),
    )


# ============================================================
# SORTER
# ============================================================

def _created_key(value) -> float:
    # Missing or unreadable timestamps rank as the oldest.
    if not value:
        return float("-inf")
    try:
        return parse_date(str(value)).timestamp()
    except (ValueError, OverflowError):
        return float("-inf")


def sort_teams(teams: List[Team]) -> List[Team]:
    """
    Non-empty teams first, then larger teams, then the most recently
    created. `sorted` is stable, so full ties keep their input order.
    """
    return sorted(
        teams,
        key=lambda team: (
            len(team.members) == 0,
            -len(team.members),
            -_created_key(team.created_at),
        ),
    )


# ============================================================
# NORMALIZER
# ============================================================

def event_card(data: EventData) -> EventCard:
    event = data.event
    return EventCard(
        name=event.name or UNKNOWN_EVENT,
        date=format_date(event.date),
        time=format_time_range(event.start_time, event.end_time),
        venue=event.venue or "TBD",
        description=event.details or "No description available",
    )


def normalize_payload(payload, tz=None) -> EventView:
    """
    Turn an API response into an EventView.

    The response must carry `success: true` and a `data` object with an
    `event`. Team events read `data.teams`, everything else reads
    `data.participants`; either list defaults to empty.
    """
    if not isinstance(payload, dict) or not payload.get("success") or not payload.get("data"):
        raise InvalidResponseError("Invalid Response: unsuccessful response or missing data")

    try:
        data = EventData.model_validate(payload["data"])
    except ValidationError as exc:
        raise InvalidResponseError(f"Invalid Response: {exc.error_count()} invalid field(s)") from exc

    if data.event.is_team:
        teams = sort_teams(data.teams)
        rows = [team_row(i, team, tz) for i, team in enumerate(teams, start=1)]
    else:
        rows = [participant_row(i, p, tz) for i, p in enumerate(data.participants, start=1)]

    logger.debug("Normalized %d %s row(s)", len(rows), "team" if data.event.is_team else "participant")
    return EventView(card=event_card(data), is_team=data.event.is_team, rows=rows, total=len(rows))


# ============================================================
# FILTER / TABLE
# ============================================================

def filter_rows(rows: List[DisplayRow], query: Optional[str]) -> List[DisplayRow]:
    needle = (query or "").lower()
    return [row for row in rows if needle in row.search_text]


def count_label(view: EventView, visible_count: int, query: Optional[str] = None) -> str:
    if query:
        return f"👥 {visible_count} of {view.total} {view.noun}"
    return f"👥 {view.total} {view.noun}"


def rows_frame(view: EventView) -> pd.DataFrame:
    columns = TEAM_COLUMNS if view.is_team else PARTICIPANT_COLUMNS
    if not view.rows:
        return pd.DataFrame(columns=columns + [SEARCH_COLUMN])
    records = [row.cells() + [row.search_text] for row in view.rows]
    return pd.DataFrame(records, columns=columns + [SEARCH_COLUMN])


def placeholder_frame(view: EventView) -> pd.DataFrame:
    return pd.DataFrame({" ": [view.empty_message]})


def filter_table(frame: pd.DataFrame, query: Optional[str]) -> pd.DataFrame:
    needle = (query or "").lower()
    if not needle or frame.empty:
        return frame
    mask = frame[SEARCH_COLUMN].str.contains(needle, regex=False, na=False)
    return frame[mask]
