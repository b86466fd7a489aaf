"""Coverage proxy and health score calculations."""

from __future__ import annotations

import math

HEALTH_FLOOR = 20
HEALTH_CEILING = 100
COVERAGE_TARGET = 50
TODO_PENALTY = 5
EXTERNAL_PENALTY = 1.5
EXTERNAL_PENALTY_CAP = 20


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; scores round .5 upwards.
    return math.floor(value + 0.5)


def infer_coverage(file_count: int, test_file_count: int) -> int:
    """Share of files that look like tests, as a whole percentage."""
    if file_count <= 0:
        return 0
    # Manual overrides can claim more test files than files.
    return max(0, min(100, round_half_up(test_file_count / file_count * 100)))


def compute_health(todo_count: int, external_count: int, coverage: int) -> int:
    """Composite 20..100 score penalising low coverage, debt markers and external reliance."""
    coverage_penalty = 0.0 if coverage >= COVERAGE_TARGET else (COVERAGE_TARGET - coverage) * 0.5
    todo_penalty = todo_count * TODO_PENALTY
    external_penalty = min(external_count * EXTERNAL_PENALTY, EXTERNAL_PENALTY_CAP)
    raw = HEALTH_CEILING - coverage_penalty - todo_penalty - external_penalty
    return max(HEALTH_FLOOR, min(HEALTH_CEILING, round_half_up(raw)))


__all__ = ["compute_health", "infer_coverage", "round_half_up"]
