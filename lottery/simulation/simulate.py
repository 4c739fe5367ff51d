# lottery/simulation/simulate.py
"""
Simulation script: creates X fake participants and executes a series of runs
for one lottery, feeding every run's groups back as history for the next.

Prints, per run, how many groups repeat a pair from the lookback window.
Uses the domain layer directly (no HTTP calls).
"""
import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from faker import Faker

from lottery.domain.matching import build_recent_pair_set, has_recent_conflict
from lottery.domain.models import (
    LotterySettings,
    Participation,
    ParticipationStatus,
    RecentMatch,
    RunMatchingRequest,
)
from lottery.domain.run_execution import plan_run_matching, select_recent_history

NUM_USERS = 24
NUM_RUNS = 8
GROUP_SIZE_MIN = 2
GROUP_SIZE_MAX = 3
REPEAT_WINDOW_RUNS = 3
DECLINE_RATE = 0.15


def run_simulation(
    num_users: int = NUM_USERS,
    num_runs: int = NUM_RUNS,
    group_size_min: int = GROUP_SIZE_MIN,
    group_size_max: int = GROUP_SIZE_MAX,
    repeat_window_runs: int = REPEAT_WINDOW_RUNS,
    decline_rate: float = DECLINE_RATE,
    seed: Optional[int] = None,
) -> List[Dict]:
    fake = Faker()
    rng = random.Random(seed)
    if seed is not None:
        fake.seed_instance(seed)

    users = [fake.unique.user_name() for _ in range(num_users)]
    lottery = LotterySettings(
        group_size_min=group_size_min,
        group_size_max=group_size_max,
        repeat_window_runs=repeat_window_runs,
    )

    history: List[RecentMatch] = []
    started = datetime(2025, 1, 6, 12, 0, tzinfo=timezone.utc)
    report = []

    for run_index in range(num_runs):
        run_id = str(uuid.UUID(int=rng.getrandbits(128)))
        participations = [
            Participation(
                user_id=u,
                status=ParticipationStatus.declined if rng.random() < decline_rate else ParticipationStatus.confirmed,
            )
            for u in users
        ]

        # pairs the run had to avoid, measured against the same window the planner uses
        recent_pairs = build_recent_pair_set(select_recent_history(history, repeat_window_runs))
        outcome = plan_run_matching(RunMatchingRequest(
            run_id=run_id,
            lottery=lottery,
            participations=participations,
            recent_matches=history,
        ))

        repeats = sum(1 for m in outcome.matches if has_recent_conflict(m.member_ids, recent_pairs))
        created_at = started + timedelta(weeks=run_index)
        history.extend(
            RecentMatch(run_id=run_id, member_ids=m.member_ids, created_at=created_at)
            for m in outcome.matches
        )

        row = {
            "run": run_index,
            "run_id": run_id,
            "confirmed": outcome.confirmed_count,
            "groups": len(outcome.matches),
            "unmatched": len(outcome.unmatched),
            "repeat_groups": repeats,
        }
        report.append(row)
        print(
            f"Run {run_index}: {row['confirmed']} confirmed, {row['groups']} groups, "
            f"{row['unmatched']} unmatched, {row['repeat_groups']} repeating a recent pair"
        )

    return report


if __name__ == "__main__":
    run_simulation()
