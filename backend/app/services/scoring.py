"""Score arithmetic for submission verdicts."""

from typing import Sequence

ERROR_PENALTY = 20
WARNING_PENALTY = 5


def compute_score(errors: Sequence[str], warnings: Sequence[str], max_score: int) -> int:
    """Stage points minus 20 per error and 5 per warning, floored at zero."""
    penalty = len(errors) * ERROR_PENALTY + len(warnings) * WARNING_PENALTY
    return max(0, max_score - penalty)
