# lottery/domain/matching.py
"""
Pure matching engine for lottery runs.

Partitions confirmed participants into small groups, avoiding pairs that were
grouped together in recent runs. Randomness is fully determined by the seed:

    seed string -> FNV-1a hash -> mulberry32 stream -> Fisher-Yates shuffle

so a run can be replayed bit-for-bit. No DB access, no I/O, inputs are never
mutated.

Functions included:
- create_matches
- effective_group_bounds
- hash_string / mulberry32 / shuffle_with_seed
- normalize_pair / build_recent_pair_set / has_recent_conflict
- chunk_greedy
"""
import logging
from collections import deque
from typing import Callable, Iterable, List, Sequence, Set, Tuple

from lottery.domain.models import MatchingInput, MatchingResult

logger = logging.getLogger(__name__)

ALGORITHM_VERSION = "v1.seeded-greedy"
MAX_ATTEMPTS = 6

_MASK32 = 0xFFFFFFFF
_FNV_OFFSET_BASIS = 2166136261
_FNV_PRIME = 16777619


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


# ----------------------------
# Seeded randomness
# ----------------------------

def hash_string(value: str) -> int:
    """
    32-bit FNV-1a over the UTF-16 code units of ``value``.

    >>> hash_string("")
    2166136261
    >>> hash_string("a")
    3826002220
    """
    data = value.encode("utf-16-le", "surrogatepass")
    h = _FNV_OFFSET_BASIS
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = _imul(h, _FNV_PRIME)
    return h


def mulberry32(seed: int) -> Callable[[], float]:
    """Return a generator function yielding floats in [0, 1) from a 32-bit state word."""
    state = seed & _MASK32

    def rand() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & _MASK32
        t = state
        t = _imul(t ^ (t >> 15), t | 1)
        t = (t ^ ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK32)) & _MASK32
        return (t ^ (t >> 14)) / 4294967296

    return rand


def shuffle_with_seed(items: Sequence[str], seed: str) -> List[str]:
    """Fisher-Yates shuffle of a copy of ``items`` driven by ``mulberry32(hash_string(seed))``."""
    rand = mulberry32(hash_string(seed))
    arr = list(items)
    for i in range(len(arr) - 1, 0, -1):
        j = int(rand() * (i + 1))
        arr[i], arr[j] = arr[j], arr[i]
    return arr


# ----------------------------
# Recent pair bookkeeping
# ----------------------------

def normalize_pair(a: str, b: str) -> str:
    return f"{a}::{b}" if a < b else f"{b}::{a}"


def build_recent_pair_set(recent_matches: Iterable[Sequence[str]]) -> Set[str]:
    """Every unordered pair that shared a group in the supplied history."""
    pairs = set()
    for members in recent_matches:
        for i in range(len(members)):
            for j in range(i + 1, len(members)):
                pairs.add(normalize_pair(members[i], members[j]))
    return pairs


def has_recent_conflict(group: Sequence[str], recent_pairs: Set[str]) -> bool:
    for i in range(len(group)):
        for j in range(i + 1, len(group)):
            if normalize_pair(group[i], group[j]) in recent_pairs:
                return True
    return False


# ----------------------------
# Grouping
# ----------------------------

def effective_group_bounds(group_size_min: int, group_size_max: int) -> Tuple[int, int]:
    """
    Normalize caller bounds instead of rejecting them.

    >>> effective_group_bounds(3, 2)
    (2, 2)
    >>> effective_group_bounds(1, 4)
    (2, 4)
    """
    min_size = max(2, min(group_size_min, group_size_max))
    max_size = max(min_size, group_size_max)
    return min_size, max_size


def chunk_greedy(ids: Sequence[str], min_size: int, max_size: int) -> Tuple[List[List[str]], List[str]]:
    """
    Slice ``ids`` into consecutive groups of ``min_size``, then hand the
    remainder out round-robin to groups still below ``max_size``.

    Returns (groups, unmatched).

    >>> chunk_greedy(["a", "b", "c", "d", "e", "f", "g"], 2, 3)
    ([['a', 'b', 'g'], ['c', 'd'], ['e', 'f']], [])
    """
    groups: List[List[str]] = []
    idx = 0
    while idx + min_size <= len(ids):
        groups.append(list(ids[idx: idx + min_size]))
        idx += min_size

    remaining = deque(ids[idx:])
    if not remaining or not groups:
        return groups, list(remaining)

    g = 0
    while remaining:
        if len(groups[g]) < max_size:
            groups[g].append(remaining.popleft())
        g = (g + 1) % len(groups)

        if all(len(group) >= max_size for group in groups):
            break

    return groups, list(remaining)


def create_matches(matching_input: MatchingInput) -> MatchingResult:
    """
    Group participants for one run.

    Tries up to MAX_ATTEMPTS seeded shuffles and returns the first grouping in
    which no group repeats a recent pair. If every attempt conflicts, a final
    "fallback" shuffle is returned as-is.
    """
    min_size, max_size = effective_group_bounds(
        matching_input.group_size_min, matching_input.group_size_max
    )
    recent_pairs = build_recent_pair_set(matching_input.recent_matches)

    participant_ids = matching_input.participant_ids
    base_seed = f"{matching_input.seed}:{len(participant_ids)}"

    for attempt in range(MAX_ATTEMPTS):
        shuffled = shuffle_with_seed(participant_ids, f"{base_seed}:{attempt}")
        groups, remainder = chunk_greedy(shuffled, min_size, max_size)

        if not any(has_recent_conflict(group, recent_pairs) for group in groups):
            return MatchingResult(
                matches=groups,
                unmatched=remainder,
                algorithm_version=ALGORITHM_VERSION,
            )

    logger.debug(
        f"All {MAX_ATTEMPTS} attempts repeated a recent pair for seed {matching_input.seed!r}; using fallback"
    )
    shuffled = shuffle_with_seed(participant_ids, f"{base_seed}:fallback")
    groups, remainder = chunk_greedy(shuffled, min_size, max_size)

    return MatchingResult(
        matches=groups,
        unmatched=remainder,
        algorithm_version=ALGORITHM_VERSION,
    )
