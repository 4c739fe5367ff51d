# lottery/api/routers/runs.py
"""
Run endpoints: execute matching for a run, cancel a run.

The caller owns the run record; these endpoints only decide what should
happen to it and return the resulting status and matches.
"""
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import Field

from lottery.domain.models import (
    DomainModel,
    LotterySettings,
    Participation,
    RecentMatch,
    RunMatchingOutcome,
    RunMatchingRequest,
    RunStatus,
)
from lottery.domain.run_execution import RunStateError, cancel_run_status, plan_run_matching

router = APIRouter()


class ExecuteRunReq(DomainModel):
    status: RunStatus = RunStatus.scheduled
    lottery: LotterySettings = Field(default_factory=LotterySettings)
    participations: List[Participation] = Field(default_factory=list)
    recent_matches: List[RecentMatch] = Field(default_factory=list)


class CancelRunReq(DomainModel):
    status: RunStatus
    reason: Optional[str] = Field(default=None, min_length=1, max_length=500)


@router.post("/{run_id}/execute", response_model=RunMatchingOutcome, summary="Execute matching for a run")
def execute_run(run_id: str, req: ExecuteRunReq):
    request = RunMatchingRequest(run_id=run_id, **req.model_dump())
    try:
        return plan_run_matching(request)
    except RunStateError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{run_id}/cancel", summary="Cancel a run")
def cancel_run(run_id: str, req: CancelRunReq):
    try:
        status = cancel_run_status(req.status)
    except RunStateError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"run_id": run_id, "status": status.value, "reason": req.reason}
