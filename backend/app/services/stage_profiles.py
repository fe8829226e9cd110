"""
Per-stage validation profiles.

Each escape room stage expects a particular solution shape. The table below
lists the code fragments a submission for that stage must exhibit; see
pattern_matcher for how each literal is interpreted.
"""

from typing import Dict, Tuple

from ..models.linting import ValidationOptions

STAGE_PATTERNS: Dict[int, Tuple[str, ...]] = {
    1: ("def calculate_sum", "for num in numbers", "sum += num", "return sum"),
    2: ("for i in range", "print(i)"),
    3: ("def add_numbers", "return a + b"),
    4: ("for i in range", 'print("*" * i)'),
    5: ("max(numbers)",),
    6: ('count("a")', "count('a')"),
    7: ("[::-1]",),
    8: ("def find_maximum", "arr[0]", "for ", "if ", "return "),
    9: ("a, b = 0, 1", "a, b = b, a + b"),
    10: ("def is_prime", "int(n**0.5)", "if n % i == 0", "return True"),
    11: ("[", "for ", "**"),
    12: ("max(", "key=", "get"),
    13: ("title()",),
    14: ("split(", "len("),
    15: ("split(", "obj[", "for i in range"),
    16: ("for i in range", "for j in range", "arr[j]", "arr[j + 1]"),
    17: ("def factorial", "if n <= 1", "return n * factorial"),
    18: ("left", "right", "mid", "while"),
    19: ("re.", "@", "email"),
    20: ("class ", "def __init__", "def deposit", "def withdraw"),
}


def build_validation_options(stage_id: int) -> ValidationOptions:
    """All checks enabled, plus the stage's required patterns (none for unknown stages)."""
    return ValidationOptions(
        check_syntax=True,
        check_style=True,
        check_logic=True,
        required_patterns=list(STAGE_PATTERNS.get(stage_id, ())),
    )
