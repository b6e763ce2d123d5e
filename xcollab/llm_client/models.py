from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Dict, Any, Union

from xcollab.utils import split_csv


def _split_csv(value: Any) -> Any:
    """Accept "a, b" as well as ["a", "b"] for loosely typed list fields."""
    return split_csv(value) if isinstance(value, str) else value


def _str_items(value: Any) -> Any:
    """Stringify list items (JSON bodies and LLM output mix numbers in)."""
    if isinstance(value, list):
        return [str(x) for x in value if x is not None]
    return value


# ─────────────────────────────────────────────────────────────
# Requests
# ─────────────────────────────────────────────────────────────

class IdeaRequest(BaseModel):
    """
    Request used by /api/ai/idea
    """
    track: str = "General"
    skills: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)

    @field_validator("skills", "interests", mode="before")
    @classmethod
    def _csv_lists(cls, v: Any) -> Any:
        return _str_items(_split_csv(v))

    @field_validator("track", mode="before")
    @classmethod
    def _blank_track(cls, v: Any) -> Any:
        return v or "General"


class ProposalRequest(BaseModel):
    """
    Request used by /api/ai/proposal
    """
    idea: Optional[str] = ""
    # Team is echoed into the prompt verbatim, any JSON value is accepted
    team: List[Any] = Field(default_factory=list)

    @field_validator("idea", mode="before")
    @classmethod
    def _idea_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)


class MatchRequest(BaseModel):
    """
    Request used by /api/ai/match
    """
    model_config = ConfigDict(populate_by_name=True)

    pool_user_ids: List[str] = Field(default_factory=list, alias="poolUserIds")
    team_size: int = Field(3, alias="teamSize")

    @field_validator("pool_user_ids", mode="before")
    @classmethod
    def _csv_ids(cls, v: Any) -> Any:
        return _str_items(_split_csv(v))

    @field_validator("team_size", mode="before")
    @classmethod
    def _default_size(cls, v: Any) -> Any:
        return v or 3


# ─────────────────────────────────────────────────────────────
# Core domain models
# ─────────────────────────────────────────────────────────────

class Hackathon(BaseModel):
    """
    Hackathon row as stored in the data store.
    Unknown columns are kept so the row survives a round trip.
    """
    model_config = ConfigDict(extra="allow")

    id: str
    title: str = ""
    description: str = ""
    tracks: List[str] = Field(default_factory=list)
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    min_team_size: Optional[int] = None
    max_team_size: Optional[int] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return str(v) if v is not None else v

    @field_validator("title", "description", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("tracks", mode="before")
    @classmethod
    def _tracks(cls, v: Any) -> Any:
        return _str_items(_split_csv(v)) or []

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Hackathon":
        return cls(**row)


# ─────────────────────────────────────────────────────────────
# LLM output models
# ─────────────────────────────────────────────────────────────

class IdeaCard(BaseModel):
    """
    Structured idea, when the LLM respected the requested shape.
    """
    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    short_desc: Optional[str] = None
    stack: Optional[List[str]] = None
    roadmap: Optional[List[str]] = None

    @field_validator("stack", "roadmap", mode="before")
    @classmethod
    def _items_as_str(cls, v: Any) -> Any:
        return _str_items(v)


# An idea is whatever the model produced: a card or a bare string
Idea = Union[IdeaCard, str]


class Team(BaseModel):
    """
    Team suggested by the LLM. Composition is not validated.
    """
    members: List[str] = Field(default_factory=list)
    reason: Optional[str] = None

    @field_validator("members", mode="before")
    @classmethod
    def _members_as_str(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [str(x) for x in v]
        return v


class MatchResult(BaseModel):
    """
    Response returned by /api/ai/match.
    `raw` carries the model text when no team list could be parsed.
    """
    teams: List[Team]
    raw: Optional[str] = None
