"""
Required-pattern matching for stage submissions.

A stage lists literal code fragments ("def calculate_sum", "for i in range",
"sum += num", ...) that a submission must exhibit. Patterns are not regular
expressions: each literal is classified once into a PatternSpec (a kind plus the
fragments that kind needs), and a matcher per kind decides whether the
normalized submission satisfies it.

Matching is permissive on naming and spacing but strict on keywords: a loop
pattern needs a real `for ... in` header, so `for i range(10)` never satisfies
`for i in range`. Literals no rule recognizes never match.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Callable, Dict, Iterator, Tuple

from .normalizer import normalize

logger = logging.getLogger(__name__)


class PatternKind(str, Enum):
    """Heuristic family a pattern literal belongs to."""
    FUNCTION_DEF = "function_def"
    LOOP_OVER_NAMED = "loop_over_named"
    LOOP_WITH_RANGE = "loop_with_range"
    ACCUMULATOR = "accumulator"
    KEYWORD = "keyword"
    COMPOUND = "compound"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PatternSpec:
    """
    A classified pattern literal.

    `required` fragments must all appear in the normalized code; when `any_of`
    is set at least one of its fragments must appear too. `compact` compares
    against the code with all whitespace removed.
    """

    literal: str
    kind: PatternKind
    required: Tuple[str, ...] = ()
    any_of: Tuple[str, ...] = ()
    compact: bool = False


@dataclass(frozen=True)
class _CompoundRule:
    triggers: Tuple[str, ...]
    required: Tuple[str, ...]
    any_of: Tuple[str, ...] = ()
    compact: bool = False
    all_triggers: bool = False

    def applies_to(self, pattern: str) -> bool:
        check = all if self.all_triggers else any
        return check(trigger in pattern for trigger in self.triggers)


# Single-token patterns matched by plain containment
EXACT_TOKENS = (
    "for ", "if ", "return ", "**", "key=", "get", "re.", "[", "obj[", "arr[0]",
    "left", "right", "mid", "while", "email", "@",
)

# Literals with a fixed, hand-written interpretation
EXACT_SPECS = {
    "arr[j]": (PatternKind.COMPOUND, ("arr[", "j")),
    "arr[j + 1]": (PatternKind.COMPOUND, ("arr[", "j")),
    "for j in range": (PatternKind.LOOP_WITH_RANGE, ("j", "range")),
}

# Multi-fragment idioms, checked in order
COMPOUND_RULES = (
    _CompoundRule(("obj[headers[i]] = values[i]",), ("obj[", "headers[", "values[")),
    _CompoundRule(("arr[j], arr[j + 1] = arr[j + 1], arr[j]",), ("arr[", "arr[j + 1]", "arr[j]")),
    _CompoundRule(("a, b = 0, 1",), ("a,b=0,1",), compact=True),
    _CompoundRule(("a, b = b, a + b",), ("a,b=b,a+b",), compact=True),
    _CompoundRule(("int(n**0.5)",), ("int(", "**0.5")),
    _CompoundRule(("if n % i == 0",), ("if ", " % ", " == 0")),
    _CompoundRule(("[x**2 for x in numbers]",), ("[", "**2", " for ", " in ")),
    _CompoundRule(("max(scores, key=scores.get)",), ("max(", "key=", ".get")),
    _CompoundRule(('split("\\n")', "split('\\n')"), ("split(",), any_of=('"\\n"', "'\\n'")),
    _CompoundRule(("split(',')", 'split(",")'), ("split(",), any_of=("','", '","')),
    _CompoundRule(("if n <= 1",), ("if ", " <= 1")),
    _CompoundRule(("return n * factorial",), ("return ", " * ", "factorial(")),
    _CompoundRule(("left", "right", "mid", "while"), ("left", "right", "mid", "while"), all_triggers=True),
    _CompoundRule(("re.findall", "re.search"), ("re.",), any_of=("findall", "search")),
    _CompoundRule(("self.balance",), ("self.", "balance")),
    _CompoundRule(("if ", " <= "), ("if ", " <= "), all_triggers=True),
)

# Families matched by the first token the literal contains
KEYWORD_FAMILIES = (
    "return ", "print(", "max(", "count(", "[::-1]", "title()", "split(", "len(",
    "while ", "class ", "self.", "import ", "@",
)

_FUNCTION_DEF = re.compile(r"\bdef\s+([A-Za-z_]\w*)")
_LOOP_LITERAL = re.compile(r"^for\s+([A-Za-z_]\w*(?:\s*,\s*[A-Za-z_]\w*)*)\s+in\s+(.+)$")
_IDENTIFIER = re.compile(r"^[A-Za-z_]\w*$")
_LOOP_HEADER = re.compile(r"\bfor\s+[^:]+?\s+in\b")
_TRIPLE_QUOTED = re.compile(r'"""[\s\S]*?"""|\'\'\'[\s\S]*?\'\'\'')
_STRING_LITERAL = re.compile(r"'[^'\n]*'|\"[^\"\n]*\"")
_SELF_ADD = re.compile(r"\b([a-z_]\w*)\s*=\s*\1\s*\+")
_WHITESPACE = re.compile(r"\s+")


def _spec(pattern: str, kind: PatternKind, required=(), any_of=(), compact=False) -> PatternSpec:
    return PatternSpec(
        literal=pattern,
        kind=kind,
        required=tuple(fragment.lower() for fragment in required),
        any_of=tuple(fragment.lower() for fragment in any_of),
        compact=compact,
    )


@lru_cache(maxsize=None)
def classify_pattern(pattern: str) -> PatternSpec:
    """
    Decide which heuristic family a pattern literal belongs to.

    Order matters: exact literals first, then function definitions, loops,
    multi-fragment idioms, accumulation, and finally single-token families.

    Args:
        pattern: Literal pattern string from a stage profile

    Returns:
        PatternSpec (kind UNKNOWN when no family recognizes the literal)
    """
    literal = pattern.strip()

    if literal in EXACT_SPECS:
        kind, required = EXACT_SPECS[literal]
        return _spec(pattern, kind, required)

    if pattern in EXACT_TOKENS:
        return _spec(pattern, PatternKind.KEYWORD, (pattern,))

    def_match = _FUNCTION_DEF.search(pattern)
    if def_match:
        return _spec(pattern, PatternKind.FUNCTION_DEF, (def_match.group(1),))

    loop_match = _LOOP_LITERAL.match(literal)
    if loop_match:
        iterable = loop_match.group(2).strip()
        if iterable.startswith("range"):
            return _spec(pattern, PatternKind.LOOP_WITH_RANGE, (iterable,))
        return _spec(pattern, PatternKind.LOOP_OVER_NAMED, (iterable,))

    for rule in COMPOUND_RULES:
        if rule.applies_to(pattern):
            return _spec(pattern, PatternKind.COMPOUND, rule.required, rule.any_of, rule.compact)

    if "+=" in pattern:
        return _spec(pattern, PatternKind.ACCUMULATOR)

    for token in KEYWORD_FAMILIES:
        if token in pattern:
            return _spec(pattern, PatternKind.KEYWORD, (token,))

    logger.debug(f"Pattern '{pattern}' is not recognized by any heuristic")
    return _spec(pattern, PatternKind.UNKNOWN)


def _match_function_def(spec: PatternSpec, normalized: str, code: str) -> bool:
    name = spec.required[0]
    if f"def {name}" not in normalized:
        return False
    # The definition has to be real code, not a mention in a comment
    definition = re.compile(rf"def\s+{re.escape(name)}\b", re.IGNORECASE)
    return any(definition.match(line.strip()) for line in code.splitlines())


def _code_lines(code: str) -> Iterator[str]:
    """Lowercased source lines with string literals blanked and comments dropped."""
    code = _TRIPLE_QUOTED.sub("''", code)
    for line in code.splitlines():
        line = _STRING_LITERAL.sub("''", line).split("#", 1)[0].strip()
        if line:
            yield line.lower()


def _match_loop(spec: PatternSpec, normalized: str, code: str) -> bool:
    # The `in` has to belong to a real loop header, not a comment or a string
    if not any(_LOOP_HEADER.search(line) for line in _code_lines(code)):
        return False
    return all(fragment in normalized for fragment in spec.required)


def _match_accumulator(spec: PatternSpec, normalized: str, code: str) -> bool:
    return "+=" in normalized or bool(_SELF_ADD.search(normalized))


def _match_keyword(spec: PatternSpec, normalized: str, code: str) -> bool:
    return spec.required[0] in normalized


def _match_compound(spec: PatternSpec, normalized: str, code: str) -> bool:
    haystack = _WHITESPACE.sub("", normalized) if spec.compact else normalized
    if not all(fragment in haystack for fragment in spec.required):
        return False
    return not spec.any_of or any(fragment in haystack for fragment in spec.any_of)


def _match_unknown(spec: PatternSpec, normalized: str, code: str) -> bool:
    return False


MATCHERS: Dict[PatternKind, Callable[[PatternSpec, str, str], bool]] = {
    PatternKind.FUNCTION_DEF: _match_function_def,
    PatternKind.LOOP_OVER_NAMED: _match_loop,
    PatternKind.LOOP_WITH_RANGE: _match_loop,
    PatternKind.ACCUMULATOR: _match_accumulator,
    PatternKind.KEYWORD: _match_keyword,
    PatternKind.COMPOUND: _match_compound,
    PatternKind.UNKNOWN: _match_unknown,
}


def matches_pattern(code: str, pattern: str) -> bool:
    """
    Check whether submitted code exhibits a stage pattern.

    Args:
        code: Raw submitted source (never executed)
        pattern: Literal pattern from the stage profile

    Returns:
        True if the pattern's heuristic is satisfied
    """
    spec = classify_pattern(pattern)
    return MATCHERS[spec.kind](spec, normalize(code), code)
