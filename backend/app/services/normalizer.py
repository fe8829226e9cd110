"""
Source text normalization for fuzzy comparison.

`normalize` is the canonical form used by the pattern matcher. The solution
helpers below are used by the gameplay layer to report whether a submission is
(a fragment of) the stage's canonical solution.
"""

import re

_WHITESPACE = re.compile(r"\s+")
_SOLUTION_PUNCTUATION = re.compile(r"[,\[\]]")


def normalize(code: str) -> str:
    """Trim, collapse whitespace runs to single spaces, lowercase."""
    return _WHITESPACE.sub(" ", code.strip()).lower()


def normalize_for_solution(code: str) -> str:
    """Like `normalize`, but commas and square brackets count as whitespace."""
    return normalize(_SOLUTION_PUNCTUATION.sub(" ", code))


def matches_solution(user_code: str, solution: str) -> bool:
    """True when either normalized text contains the other. Empty code never matches."""
    user_normalized = normalize_for_solution(user_code or "")
    solution_normalized = normalize_for_solution(solution or "")
    if not user_normalized or not solution_normalized:
        return False
    return user_normalized in solution_normalized or solution_normalized in user_normalized
