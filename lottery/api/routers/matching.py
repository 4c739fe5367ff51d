# lottery/api/routers/matching.py
"""
Stateless matching endpoint: run the matching engine on a caller-supplied input.
"""
from fastapi import APIRouter

from lottery.domain.matching import create_matches
from lottery.domain.models import MatchingInput, MatchingResult

router = APIRouter()


@router.post("", response_model=MatchingResult, summary="Partition participants into groups")
def run_matching(req: MatchingInput):
    return create_matches(req)
