# lottery/domain/models.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from lottery.config.settings import settings


class DomainModel(BaseModel):
    """Base for DTOs: snake_case in Python, camelCase accepted and emitted over HTTP."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ----------------------------
# Matching engine
# ----------------------------

class MatchingInput(DomainModel):
    participant_ids: List[str] = Field(default_factory=list)
    group_size_min: int
    group_size_max: int
    recent_matches: List[List[str]] = Field(default_factory=list)
    seed: str


class MatchingResult(DomainModel):
    matches: List[List[str]] = Field(default_factory=list)
    unmatched: List[str] = Field(default_factory=list)
    algorithm_version: str


# ----------------------------
# Run workflow
# ----------------------------

class RunStatus(str, Enum):
    scheduled = "scheduled"
    matching = "matching"
    matched = "matched"
    canceled = "canceled"


class ParticipationStatus(str, Enum):
    invited = "invited"
    confirmed = "confirmed"
    declined = "declined"
    withdrawn = "withdrawn"


class RunOutcome(str, Enum):
    matched = "matched"
    skipped_insufficient_participants = "skipped_insufficient_participants"
    already_matched = "already_matched"


class LotterySettings(DomainModel):
    group_size_min: int = Field(default=settings.GROUP_SIZE_MIN_DEFAULT, ge=2, le=4)
    group_size_max: int = Field(default=settings.GROUP_SIZE_MAX_DEFAULT, ge=2, le=4)
    repeat_window_runs: int = Field(default=settings.REPEAT_WINDOW_RUNS_DEFAULT, ge=0, le=12)

    @model_validator(mode="after")
    def check_size_order(self):
        if self.group_size_min > self.group_size_max:
            raise ValueError("group_size_min must be <= group_size_max")
        return self


class Participation(DomainModel):
    user_id: str
    status: ParticipationStatus = ParticipationStatus.confirmed


class RecentMatch(DomainModel):
    run_id: Optional[str] = None
    member_ids: List[str] = Field(default_factory=list)
    created_at: datetime


class RunMatchingRequest(DomainModel):
    run_id: str
    status: RunStatus = RunStatus.scheduled
    lottery: LotterySettings = Field(default_factory=LotterySettings)
    participations: List[Participation] = Field(default_factory=list)
    recent_matches: List[RecentMatch] = Field(default_factory=list)


class MatchRecord(DomainModel):
    member_ids: List[str]
    algorithm_version: str


class RunMatchingOutcome(DomainModel):
    run_id: str
    status: RunStatus
    outcome: RunOutcome
    matches: List[MatchRecord] = Field(default_factory=list)
    unmatched: List[str] = Field(default_factory=list)
    confirmed_count: int = 0
    algorithm_version: Optional[str] = None
