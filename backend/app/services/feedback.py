"""
Learner-facing feedback for submission verdicts.

Raw diagnostics (pattern misses, native check messages, pyflakes/pylint output)
are rewritten into plain language before they are shown:

1. Tool prefixes (`/tmp/submission_x.py:3:1:`), leading bullets and diagnostic
   codes (`E0602:`) are removed.
2. "Missing required pattern" messages are rephrased with a friendly description
   of the missing idiom.
3. The ordered JARGON_RULES table replaces technical terms and attaches a short
   hint to the categories it knows.

`simplify_message` is total and idempotent: no replacement text contains a rule
phrase, and hints are only appended once.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

HEADLINE_EXCELLENT = "Excellent! Your code is clean and well-structured."
HEADLINE_GOOD = "Good work! Your code runs correctly with minor style suggestions."
HEADLINE_ISSUES = "Your code has some issues that need attention."

ERRORS_TITLE = "❌ Issues to fix:"
WARNINGS_TITLE = "💡 Suggestions for improvement:"

MAX_LISTED_ERRORS = 3
MAX_LISTED_WARNINGS = 2

HINT_UNDEFINED = "Make sure you define the variable before using it"
HINT_UNUSED_VARIABLE = "You can remove this variable if you're not using it"
HINT_UNUSED_IMPORT = "You can remove this import if you're not using it"
HINT_SYNTAX = "Check your spelling and punctuation"
HINT_INDENT = "Make sure your indentation is consistent (use 4 spaces)"
HINT_NAME = "Check if the variable or function name is spelled correctly"
HINT_TYPE = "Check if you're using the right type of data"
HINT_ATTRIBUTE = "Check if the object has the attribute you're trying to use"
HINT_VALUE = "Check if the value you're using is valid"
HINT_KEY = "Check if the key exists in the dictionary"
HINT_INDEX = "Check if the index is within the list range"
HINT_COLON = "Lines starting with if, for, while, def or class need a ':' at the end"
HINT_BRACKETS = "Every opening bracket needs a matching closing one"
HINT_QUOTES = "Every string needs matching opening and closing quotes"
HINT_LONG_LINE = "Try splitting it over several shorter lines"


@dataclass(frozen=True)
class JargonRule:
    """
    One entry of the jargon table.

    `phrase` is matched case-insensitively. When `replacement` is set the phrase
    is rewritten; when `hint` is set it is appended to any message that ends up
    containing the rule's friendly text.
    """

    phrase: str
    replacement: Optional[str] = None
    hint: Optional[str] = None

    @property
    def marker(self) -> str:
        return (self.replacement or self.phrase).lower()


JARGON_RULES = (
    JargonRule("Forbidden pattern found:", "You should not use:"),
    # pyflakes wording
    JargonRule("imported but unused", "is an unused import", HINT_UNUSED_IMPORT),
    JargonRule("is assigned to but never used", "is an unused variable", HINT_UNUSED_VARIABLE),
    JargonRule("undefined name", "undefined variable", HINT_UNDEFINED),
    # pylint message symbols
    JargonRule("undefined-variable", "undefined variable", HINT_UNDEFINED),
    JargonRule("unused-variable", "unused variable", HINT_UNUSED_VARIABLE),
    JargonRule("unused-import", "unused import", HINT_UNUSED_IMPORT),
    JargonRule("syntax-error", "syntax error", HINT_SYNTAX),
    JargonRule("invalid syntax", "syntax error", HINT_SYNTAX),
    # Python exception names
    JargonRule("IndentationError", "indentation error", HINT_INDENT),
    JargonRule("TabError", "indentation error", HINT_INDENT),
    JargonRule("SyntaxError", "syntax error", HINT_SYNTAX),
    JargonRule("ModuleNotFoundError", "module not found"),
    JargonRule("ImportError", "import error"),
    JargonRule("UnboundLocalError", "name error", HINT_NAME),
    JargonRule("NameError", "name error", HINT_NAME),
    JargonRule("TypeError", "type error", HINT_TYPE),
    JargonRule("AttributeError", "attribute error", HINT_ATTRIBUTE),
    JargonRule("ValueError", "value error", HINT_VALUE),
    JargonRule("KeyError", "key error", HINT_KEY),
    JargonRule("IndexError", "index error", HINT_INDEX),
    JargonRule("ZeroDivisionError", "division by zero error"),
    JargonRule("RecursionError", "recursion error"),
    JargonRule("FileNotFoundError", "file not found"),
    JargonRule("PermissionError", "permission denied"),
    JargonRule("MemoryError", "memory error"),
    JargonRule("RuntimeError", "runtime error"),
    JargonRule("OverflowError", "overflow error"),
    JargonRule("AssertionError", "assertion error"),
    JargonRule("StopIteration", "stop iteration"),
    JargonRule("UnicodeDecodeError", "text decoding error"),
    JargonRule("JSONDecodeError", "json error"),
    JargonRule("TimeoutError", "timeout error"),
    JargonRule("ConnectionError", "connection error"),
    JargonRule("OSError", "os error"),
    # Categories that only get a hint
    JargonRule("missing colon", hint=HINT_COLON),
    JargonRule("unmatched parentheses", hint=HINT_BRACKETS),
    JargonRule("unmatched single quotes", hint=HINT_QUOTES),
    JargonRule("unmatched double quotes", hint=HINT_QUOTES),
    JargonRule("inconsistent indentation", hint=HINT_INDENT),
    JargonRule("is too long", hint=HINT_LONG_LINE),
)

# Friendly descriptions of stage pattern literals
PATTERN_DESCRIPTIONS = {
    "def calculate_sum": "a function called calculate_sum",
    "for num in numbers": "a loop that goes through the numbers",
    "sum += num": "add each number to a total (like sum += num)",
    "return sum": "return the total",
    "for i in range": "a loop using range",
    "print(i)": "print each number",
    "def add_numbers": "a function called add_numbers",
    "return a + b": "return the sum of a and b",
    'print("*" * i)': "print a row of stars on each line",
    "max(numbers)": "find the maximum number",
    'count("a")': 'count the letter "a"',
    "count('a')": 'count the letter "a"',
    "[::-1]": "reverse the string",
    "def find_maximum": "a function called find_maximum",
    "arr[0]": "start from the first element (arr[0])",
    "for": "a for loop",
    "if": "an if statement",
    "return": "a return statement",
    "a, b = 0, 1": "start the sequence with a, b = 0, 1",
    "a, b = b, a + b": "move both numbers forward with a, b = b, a + b",
    "def is_prime": "a function called is_prime",
    "int(n**0.5)": "only check divisors up to the square root of n",
    "if n % i == 0": "check whether i divides n evenly",
    "return True": "return True when no divisor is found",
    "[": "a list",
    "**": "the power operator (**)",
    "max(": "the max() function",
    "key=": "a key= argument",
    "get": "the dictionary get method",
    "title()": "capitalize each word",
    'split("\\n")': "split by new lines",
    "split('\\n')": "split by new lines",
    "split(": "split the text into parts",
    "len(lines)": "count the lines",
    "len(": "the len() function",
    "obj[": "fill a dictionary for each row (obj[...])",
    "for j in range": "an inner loop using range",
    "arr[j]": "compare neighbouring elements (arr[j])",
    "arr[j + 1]": "compare neighbouring elements (arr[j + 1])",
    "def factorial": "a function called factorial",
    "if n <= 1": "check if n is 1 or less",
    "return n * factorial": "return n times factorial of n-1",
    "return n * factorial(n - 1)": "return n times factorial of n-1",
    "left": "a left boundary",
    "right": "a right boundary",
    "mid": "a middle index",
    "while": "a while loop",
    "re.": "the re module",
    "re.findall": "use re.findall",
    "re.search": "use re.search",
    "@": "an email address (@)",
    "email": "an email variable",
    "class": "a class",
    "def __init__": "an __init__ method",
    "def __init__(self": "an __init__ method",
    "self.balance": "a balance property",
    "def deposit": "a deposit method",
    "def withdraw": "a withdraw method",
}

_TOOL_PREFIX = re.compile(r"(?:\S*?[\\/])?(?:temp|submission)_\S*?\.py:\d+:(?:\d+:)?\s*|\S*?\.py:\d+:\d+:\s*")
_MISSING_PATTERN = re.compile(r"^Missing required (?:pattern|code):\s*(.*)$", re.DOTALL | re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_LEADING_BULLETS = re.compile(r"^(?:\s*[-•❌]\s*)+")
# Diagnostic codes such as pylint's "E0602:"
_CODE_PREFIX = re.compile(r"^[a-z]+\d+:\s*", re.IGNORECASE)
_COMPILED_RULES = tuple(
    (rule, re.compile(re.escape(rule.phrase), re.IGNORECASE)) for rule in JARGON_RULES
)


def _describe_missing_pattern(text: str) -> str:
    match = _MISSING_PATTERN.match(text)
    if not match:
        return text
    literal = match.group(1).strip()
    return f"You need to include: {PATTERN_DESCRIPTIONS.get(literal, literal)}"


def _strip_prefixes(text: str) -> str:
    text = _LEADING_BULLETS.sub("", text)
    return _CODE_PREFIX.sub("", text, count=1)


def _rewrite(text: str) -> str:
    """One pass of the rewriting pipeline, without hints."""
    text = _TOOL_PREFIX.sub("", text)
    text = _WHITESPACE.sub(" ", text).strip()
    text = _strip_prefixes(text).replace("`", "").strip()
    text = _describe_missing_pattern(text)

    for rule, compiled in _COMPILED_RULES:
        if rule.replacement is not None:
            text = compiled.sub(rule.replacement, text)

    text = _WHITESPACE.sub(" ", text).strip()
    if text:
        text = text[0].upper() + text[1:]
    return text


def simplify_message(message: str) -> str:
    """
    Rewrite one diagnostic into learner-friendly wording.

    The rewriting pass is repeated until the text stops changing, so prefixes
    hidden behind other prefixes are removed too and a second call is a no-op.

    Args:
        message: Raw diagnostic text (any string)

    Returns:
        Simplified message; non-empty whenever the input is non-empty
    """
    if not isinstance(message, str):
        message = "" if message is None else str(message)
    if not message:
        return message

    previous, text = message, _rewrite(message)
    while text != previous:
        previous, text = text, _rewrite(text)

    if not text:
        return message.strip() or message

    lowered = text.lower()
    added: List[str] = []
    for rule in JARGON_RULES:
        if rule.hint and rule.hint not in added and rule.marker in lowered and rule.hint not in text:
            added.append(rule.hint)
    for hint in added:
        text += f" - {hint}"

    return text


def _block(title: str, messages: Sequence[str], limit: int, noun: str) -> str:
    lines = [title]
    lines.extend(f"• {simplify_message(message)}" for message in messages[:limit])
    if len(messages) > limit:
        lines.append(f"...and {len(messages) - limit} more {noun}")
    return "\n".join(lines)


def compose_feedback(errors: Sequence[str], warnings: Sequence[str]) -> str:
    """
    Build the multi-line feedback shown to the learner.

    The headline depends on what was found; up to three errors and two warnings
    are listed, with a count of the rest.
    """
    if not errors and not warnings:
        return HEADLINE_EXCELLENT

    sections = [HEADLINE_ISSUES if errors else HEADLINE_GOOD]
    if errors:
        sections.append(_block(ERRORS_TITLE, errors, MAX_LISTED_ERRORS, "issues"))
    if warnings:
        sections.append(_block(WARNINGS_TITLE, warnings, MAX_LISTED_WARNINGS, "suggestions"))
    return "\n\n".join(sections)
