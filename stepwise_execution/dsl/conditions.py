"""Step conditions.

A condition maps variable paths to matchers; a step runs only when every
entry matches. A matcher is either a literal (equality) or a dict of
operators::

    {"lang": "fr", "doc": {"$null": False}, "pages": {"$gt": 0, "$lte": 100}}
"""

import operator
from collections.abc import Callable
from typing import Any

from stepwise_common.exceptions import InvalidWorkflowDefinition

_COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "$gt": operator.gt,
    "$gte": operator.ge,
    "$lt": operator.lt,
    "$lte": operator.le,
}


def matches(condition: dict[str, Any], lookup: Callable[[str], Any], absent: Any) -> bool:
    """Evaluate ``condition`` using ``lookup`` to read variable paths.

    Args:
        condition: Mapping of variable path to matcher
        lookup: Resolves a dotted path, returning ``absent`` when unbound
        absent: Sentinel returned by ``lookup`` for unbound paths
    """
    for path, matcher in condition.items():
        value = lookup(path)
        if value is absent:
            value = None
        if not _match_value(path, value, matcher):
            return False
    return True


def _match_value(path: str, value: Any, matcher: Any) -> bool:
    if not (isinstance(matcher, dict) and matcher and all(k.startswith("$") for k in matcher)):
        return value == matcher

    for op, expected in matcher.items():
        if op == "$eq":
            ok = value == expected
        elif op == "$ne":
            ok = value != expected
        elif op == "$null":
            ok = (value is None) == bool(expected)
        elif op == "$in":
            ok = value in _as_list(path, op, expected)
        elif op == "$nin":
            ok = value not in _as_list(path, op, expected)
        elif op in _COMPARISONS:
            try:
                ok = value is not None and _COMPARISONS[op](value, expected)
            except TypeError:
                ok = False
        else:
            raise InvalidWorkflowDefinition(
                f"Unknown condition operator '{op}' for '{path}'", path=path, operator=op
            )
        if not ok:
            return False
    return True


def _as_list(path: str, op: str, expected: Any) -> list[Any]:
    if not isinstance(expected, list):
        raise InvalidWorkflowDefinition(
            f"Condition operator '{op}' for '{path}' expects a list", path=path, operator=op
        )
    return expected
