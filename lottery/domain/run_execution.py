# lottery/domain/run_execution.py
"""
Run execution planning.

Turns a run, its lottery settings, participations and recent match history
into a matching decision. Storage and permission checks stay with the caller;
everything here works on plain DTOs.
"""
import logging
from datetime import datetime, timezone
from typing import List, Sequence

from lottery.config.settings import settings
from lottery.domain.matching import create_matches
from lottery.domain.models import (
    MatchingInput,
    MatchRecord,
    ParticipationStatus,
    RecentMatch,
    RunMatchingOutcome,
    RunMatchingRequest,
    RunOutcome,
    RunStatus,
)

logger = logging.getLogger(__name__)


class RunStateError(ValueError):
    """Raised when a run cannot make the requested status transition."""


def _as_utc(value: datetime) -> datetime:
    # naive timestamps are taken as UTC
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def select_recent_history(recent_matches: Sequence[RecentMatch], repeat_window_runs: int) -> List[List[str]]:
    """
    Newest-first member lists used as the repeat-avoidance history.

    Keeps max(window * RECENT_MATCHES_PER_RUN, RECENT_MATCHES_FLOOR) entries and
    drops groups that cannot form a pair.
    """
    limit = max(repeat_window_runs * settings.RECENT_MATCHES_PER_RUN, settings.RECENT_MATCHES_FLOOR)
    newest = sorted(recent_matches, key=lambda m: _as_utc(m.created_at), reverse=True)[:limit]
    return [list(m.member_ids) for m in newest if len(m.member_ids) >= 2]


def cancel_run_status(status: RunStatus) -> RunStatus:
    if status in (RunStatus.canceled, RunStatus.matched):
        raise RunStateError("Run cannot be canceled in its current state")
    return RunStatus.canceled


def plan_run_matching(request: RunMatchingRequest) -> RunMatchingOutcome:
    run_id = request.run_id

    if request.status == RunStatus.canceled:
        raise RunStateError("Canceled runs cannot be executed")

    if request.status == RunStatus.matched:
        return RunMatchingOutcome(
            run_id=run_id,
            status=RunStatus.matched,
            outcome=RunOutcome.already_matched,
        )

    logger.info(f"[runs] matching_started run_id={run_id}")

    confirmed = [
        p.user_id for p in request.participations
        if p.status == ParticipationStatus.confirmed
    ]
    lottery = request.lottery

    if len(confirmed) < lottery.group_size_min:
        logger.info(
            f"[runs] matching_skipped_insufficient_participants run_id={run_id} "
            f"confirmed_count={len(confirmed)}"
        )
        return RunMatchingOutcome(
            run_id=run_id,
            status=RunStatus.matched,
            outcome=RunOutcome.skipped_insufficient_participants,
            unmatched=confirmed,
            confirmed_count=len(confirmed),
        )

    result = create_matches(MatchingInput(
        participant_ids=confirmed,
        group_size_min=lottery.group_size_min,
        group_size_max=lottery.group_size_max,
        recent_matches=select_recent_history(request.recent_matches, lottery.repeat_window_runs),
        seed=run_id,
    ))

    logger.info(
        f"[runs] matched run_id={run_id} match_count={len(result.matches)} "
        f"unmatched_count={len(result.unmatched)} algorithm_version={result.algorithm_version}"
    )
    return RunMatchingOutcome(
        run_id=run_id,
        status=RunStatus.matched,
        outcome=RunOutcome.matched,
        matches=[
            MatchRecord(member_ids=members, algorithm_version=result.algorithm_version)
            for members in result.matches
        ],
        unmatched=result.unmatched,
        confirmed_count=len(confirmed),
        algorithm_version=result.algorithm_version,
    )
