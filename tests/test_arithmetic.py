import pytest

from sofiya_intent.arithmetic import (
    EvaluationError,
    evaluate,
    find_expression,
    normalize_operators,
)


@pytest.mark.parametrize("expression, expected", [
    ("45 * 8", 360),
    ("2 + 3 * 4", 14),
    ("(2 + 3) * 4", 20),
    ("-3 + 5", 2),
    ("--4", 4),
    ("7 / 2", 3.5),
    ("10 / 3", 3.3333),
    ("0.1 + 0.2", 0.3),
    ("12 x 4", 48),
    ("9 ÷ 3", 3),
    ("6 times 7", 42),
])
def test_evaluate(expression, expected):
    assert evaluate(expression) == expected


def test_integral_results_are_ints():
    assert isinstance(evaluate("45 * 8"), int)
    assert isinstance(evaluate("7 / 2"), float)


@pytest.mark.parametrize("expression", [
    "",
    "5 +",
    "5 5",
    "2 ** 3",
    "(1 + 2",
    "1 + 2)",
    "__import__('os')",
    "4 / 0",
    "(" * 40 + "1" + ")" * 40,
    "1+" * 150 + "1",
])
def test_rejects_malformed_or_unsafe_input(expression):
    with pytest.raises(EvaluationError):
        evaluate(expression)


def test_normalize_operators_only_between_numbers():
    assert normalize_operators("5 times 3") == "5 * 3"
    assert normalize_operators("10 divided by 2") == "10 / 2"
    assert normalize_operators("times square") == "times square"


@pytest.mark.parametrize("text, expected", [
    ("What is 5 plus 3?", "5 + 3"),
    ("what is 12 x 4", "12 * 4"),
    ("calculate 10 ÷ 4 please", "10 / 4"),
    ("45 * 8", "45 * 8"),
    ("7 guna 6", "7 * 6"),
    ("(2 + 3) * 4 kitna hai", "(2 + 3) * 4"),
])
def test_find_expression(text, expected):
    assert find_expression(text) == expected


def test_find_expression_without_operator():
    assert find_expression("set timer for 5 minutes") is None
    assert find_expression("") is None
