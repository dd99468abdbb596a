"""
Accuracy scoring for structured extraction results.

Two strategies are provided:
- `calculate_accuracy` compares an expected record against an actual one,
  key by key, using `deep_equal` for the values.
- `calculate_list_accuracy` scores keyword lists by overlap, penalizing
  overproduction.
"""

import json
from typing import Any, Mapping, Sequence

_MISSING = object()

_PRIMITIVE_KINDS = ("null", "bool", "number", "string")


def _kind(value: Any) -> str:
    """Classify a JSON-like value; bool is a subclass of int so it is tested first."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return "other"


def _sort_key(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


def deep_equal(a: Any, b: Any) -> bool:
    """
    Value-level equivalence of two JSON-like structures.

    Rules:
    - primitives compare by kind and value (True is not 1)
    - arrays of equal length holding only primitives compare as sets
    - other arrays are sorted canonically and compared element-wise
    - objects need equal key sets and deep-equal values
    - any kind or length mismatch is unequal

    Args:
        a: First value
        b: Second value

    Returns:
        bool: True if the values are equivalent

    Example:
        >>> deep_equal(["b", "a"], ["a", "b"])
        True
        >>> deep_equal({"x": [1, 2]}, {"x": [2, 1]})
        True
        >>> deep_equal(1, True)
        False
    """
    if a is _MISSING or b is _MISSING:
        return False

    kind_a, kind_b = _kind(a), _kind(b)
    if kind_a != kind_b:
        return False

    if kind_a in _PRIMITIVE_KINDS:
        return a == b

    if kind_a == "array":
        if len(a) != len(b):
            return False
        if all(_kind(x) in _PRIMITIVE_KINDS for x in a) and all(
            _kind(x) in _PRIMITIVE_KINDS for x in b
        ):
            return {(_kind(x), x) for x in a} == {(_kind(x), x) for x in b}
        sorted_a = sorted(a, key=_sort_key)
        sorted_b = sorted(b, key=_sort_key)
        return all(deep_equal(x, y) for x, y in zip(sorted_a, sorted_b))

    if kind_a == "object":
        if len(a) != len(b):
            return False
        for key, value in a.items():
            if key not in b or not deep_equal(value, b[key]):
                return False
        return True

    return a == b


def calculate_accuracy(expected: Mapping[str, Any], actual: Mapping[str, Any]) -> float:
    """
    Record-level accuracy of `actual` against `expected`.

    Every expected key whose value deep-equals the actual one counts as a
    match. Extra fields in `actual` grow the denominator, so they can only
    lower the score.

    Args:
        expected: Expected record
        actual: Produced record

    Returns:
        float: matches / (len(expected) + extra actual fields), in [0, 1]
    """
    if not expected:
        return 1.0 if not actual else 0.0

    matches = sum(
        1
        for key, expected_value in expected.items()
        if deep_equal(expected_value, actual.get(key, _MISSING))
    )

    total = len(expected)
    extra_fields = len(actual) - len(expected)
    if extra_fields > 0:
        total += extra_fields

    return matches / total


def calculate_list_accuracy(expected: Sequence[str], actual: Sequence[str]) -> float:
    """
    Keyword-list accuracy.

    Counts the actual keywords present in `expected`, divided by the expected
    length. When more keywords were produced than expected the score is
    scaled down by len(expected) / len(actual).

    Example:
        >>> calculate_list_accuracy(["a", "b"], ["a", "b", "c", "d"])
        0.5
    """
    if len(expected) == 0:
        return 1.0 if len(actual) == 0 else 0.0

    expected_set = set(expected)
    matched = sum(1 for keyword in actual if keyword in expected_set)
    score = matched / len(expected)

    if len(actual) > len(expected):
        score *= len(expected) / len(actual)

    return max(0.0, score)
