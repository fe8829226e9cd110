"""
Tests for required-pattern matching.

Covers classification of stage literals, the loop `in` guard, function
definitions hidden in comments, and the closed-world default for literals no
heuristic recognizes.
"""

import pytest

from backend.app.services.pattern_matcher import PatternKind, classify_pattern, matches_pattern
from backend.app.services.stage_profiles import STAGE_PATTERNS


@pytest.mark.parametrize(
    "pattern,kind",
    [
        ("def calculate_sum", PatternKind.FUNCTION_DEF),
        ("for num in numbers", PatternKind.LOOP_OVER_NAMED),
        ("for i in range", PatternKind.LOOP_WITH_RANGE),
        ("for j in range", PatternKind.LOOP_WITH_RANGE),
        ("sum += num", PatternKind.ACCUMULATOR),
        ("return sum", PatternKind.KEYWORD),
        ("print(i)", PatternKind.KEYWORD),
        ("left", PatternKind.KEYWORD),
        ("a, b = 0, 1", PatternKind.COMPOUND),
        ("arr[j + 1]", PatternKind.COMPOUND),
        ("if n <= 1", PatternKind.COMPOUND),
        ("lambda", PatternKind.UNKNOWN),
    ],
)
def test_classify_pattern(pattern, kind):
    assert classify_pattern(pattern).kind == kind


def test_every_stage_pattern_is_recognized():
    for stage_id, patterns in STAGE_PATTERNS.items():
        for pattern in patterns:
            assert classify_pattern(pattern).kind != PatternKind.UNKNOWN, (stage_id, pattern)


class TestLoopGuard:
    def test_loop_without_in_keyword_does_not_match(self):
        assert matches_pattern("for i range(10):\n    print(i)", "for i in range") is False

    def test_loop_with_in_keyword_matches(self):
        assert matches_pattern("for i in range(10):\n    print(i)", "for i in range") is True

    def test_range_mentioned_outside_a_loop_does_not_match(self):
        assert matches_pattern("values = list(range(10))", "for i in range") is False

    def test_named_loop_needs_the_container(self):
        code = "for num in numbers:\n    total += num"
        assert matches_pattern(code, "for num in numbers") is True
        assert matches_pattern("for num in values:\n    pass", "for num in numbers") is False

    def test_loop_variable_name_is_flexible(self):
        assert matches_pattern("for item in numbers:\n    print(item)", "for num in numbers") is True

    def test_nested_loop_needs_its_variable(self):
        assert matches_pattern("for i in range(n):\n    print(i)", "for j in range") is False
        assert matches_pattern("for i in range(n):\n    for j in range(n):\n        pass", "for j in range") is True

    def test_loop_header_in_a_comment_does_not_count(self):
        code = "# for i in range(10)\nfor i range(10):\n    print(i)"
        assert matches_pattern(code, "for i in range") is False

    def test_loop_header_in_a_string_does_not_count(self):
        code = "label = 'for i in range'\nfor i range(10):\n    print(label)"
        assert matches_pattern(code, "for i in range") is False

    def test_loop_header_in_a_docstring_does_not_count(self):
        code = '"""\nfor i in range(10) prints numbers\n"""\nfor i range(10):\n    print(i)'
        assert matches_pattern(code, "for i in range") is False

    def test_trailing_comment_after_real_header(self):
        code = "for i in range(3):  # count up\n    print(i)"
        assert matches_pattern(code, "for i in range") is True


class TestFunctionDefinition:
    def test_real_definition_matches(self):
        assert matches_pattern("def calculate_sum(numbers):\n    return 0", "def calculate_sum") is True

    def test_definition_in_a_comment_does_not_match(self):
        assert matches_pattern("# def calculate_sum(numbers):", "def calculate_sum") is False

    def test_longer_name_does_not_match(self):
        assert matches_pattern("def calculate_sum_of(numbers):\n    pass", "def calculate_sum") is False


class TestAccumulator:
    def test_augmented_assignment(self):
        assert matches_pattern("total += x", "sum += num") is True

    def test_explicit_self_addition(self):
        assert matches_pattern("total = total + x", "sum += num") is True

    def test_plain_assignment_does_not_match(self):
        assert matches_pattern("total = x + y", "sum += num") is False


class TestCompound:
    def test_tuple_unpack_ignores_spacing(self):
        assert matches_pattern("a,b=0,1", "a, b = 0, 1") is True
        assert matches_pattern("a, b = b, a+b", "a, b = b, a + b") is True

    def test_modulo_zero_test(self):
        assert matches_pattern("if n % i == 0:\n    return False", "if n % i == 0") is True
        assert matches_pattern("if n % i:\n    return False", "if n % i == 0") is False

    def test_factorial_recursion(self):
        assert matches_pattern("return n * factorial(n - 1)", "return n * factorial") is True
        assert matches_pattern("return n * fact(n - 1)", "return n * factorial") is False

    def test_bubble_sort_element_access(self):
        assert matches_pattern("if arr[j] > arr[j + 1]:", "arr[j + 1]") is True


class TestKeyword:
    def test_family_token_matches(self):
        assert matches_pattern("print(x)", "print(i)") is True
        assert matches_pattern("x = 1", "print(i)") is False

    def test_matching_is_case_insensitive(self):
        assert matches_pattern("RESULT = MAX(values)", "max(numbers)") is True


def test_unknown_pattern_never_matches():
    assert matches_pattern("f = lambda x: x", "lambda") is False


def test_stage_one_patterns_against_comment_only_code():
    assert not any(matches_pattern("# comment", p) for p in STAGE_PATTERNS[1])


def test_matching_is_deterministic():
    code = "def find_maximum(arr):\n    max_val = arr[0]\n    return max_val"
    first = [matches_pattern(code, p) for p in STAGE_PATTERNS[8]]
    second = [matches_pattern(code, p) for p in STAGE_PATTERNS[8]]
    assert first == second
