"""Variable scope of a running DSL workflow.

References use a single syntax, ``${path}``, where ``path`` is a dotted path
into the scope: ``${name}``, ``${doc.properties.title}``, ``${items.0.id}``.
List items are addressed by non-negative index only; ``${items.-1}`` is absent.
Nothing else in a string is special, so literal text never needs quoting;
``$${`` produces a literal ``${``.

A string made of exactly one reference is replaced by the referenced value
with its type preserved. References embedded in a larger string are
interpolated (strings as-is, anything else as JSON).

A reference to something that is not bound resolves to *absent*, not to
``None``: a mapping entry whose value is an absent reference is dropped, so
callers can tell "not bound" from "bound to null". Absent list items and
absent top-level values become ``None``; absent interpolations become ``""``.
"""

import copy
import json
import re
from collections.abc import Iterable
from typing import Any

from stepwise_common.exceptions import InvalidWorkflowDefinition

from .conditions import matches

_WHOLE_REFERENCE = re.compile(r"^\$\{([^${}]+)\}$")
_REFERENCE = re.compile(r"\$\$\{|\$\{([^${}]+)\}")


class _Absent:
    def __repr__(self) -> str:
        return "<absent>"


ABSENT: Any = _Absent()


class Vars:
    """Named bindings of one workflow scope.

    ``values`` are declarative bindings (e.g. the definition's ``vars`` or a
    step's ``params`` literal): they may contain references and are resolved
    whenever they are read, against the scope as it is at that moment.
    ``resolved`` and everything written with :meth:`set_value` are final values
    and are never walked again. A key given in ``values`` overrides the same
    key in ``resolved``.
    """

    def __init__(
        self,
        values: dict[str, Any] | None = None,
        resolved: dict[str, Any] | None = None,
    ):
        self._resolved: dict[str, Any] = dict(resolved or {})
        self._pending: dict[str, Any] = dict(values or {})
        for key in self._pending:
            self._resolved.pop(key, None)
        self._resolving: set[str] = set()

    def __contains__(self, name: str) -> bool:
        return name in self._resolved or name in self._pending

    def __repr__(self) -> str:
        return f"Vars(resolved={self._resolved!r}, pending={self._pending!r})"

    def keys(self) -> list[str]:
        return [*self._resolved, *(k for k in self._pending if k not in self._resolved)]

    def set_value(self, name: str, value: Any) -> None:
        """Bind ``name`` to an already computed value. Last write wins."""
        self._pending.pop(name, None)
        self._resolved[name] = value

    def get_value(self, name: str, default: Any = None) -> Any:
        """Return the resolved value bound to ``name``, or ``default``."""
        value = self._lookup_name(name)
        return default if value is ABSENT else value

    def pick(self, names: Iterable[str] | None) -> dict[str, Any]:
        """Resolved copies of the given bindings; unbound names are left out."""
        picked: dict[str, Any] = {}
        for name in names or ():
            value = self._lookup_name(name)
            if value is not ABSENT:
                picked[name] = copy.deepcopy(value)
        return picked

    def resolve(self) -> dict[str, Any]:
        """Fully resolved snapshot of every binding."""
        snapshot: dict[str, Any] = {}
        for name in self.keys():
            value = self._lookup_name(name)
            if value is not ABSENT:
                snapshot[name] = copy.deepcopy(value)
        return snapshot

    def resolve_params(self, value: Any) -> Any:
        """Resolve every reference embedded in ``value`` against this scope."""
        resolved = self._resolve_value(value)
        return None if resolved is ABSENT else resolved

    def lookup(self, path: str) -> Any:
        """Resolve a dotted path, returning :data:`ABSENT` when nothing is bound there."""
        head, _, rest = path.strip().partition(".")
        value = self._lookup_name(head)
        if not rest:
            return value
        for part in rest.split("."):
            if value is ABSENT:
                break
            value = _get_child(value, part)
        return value

    def match(self, condition: dict[str, Any] | None) -> bool:
        """Whether the scope satisfies a step condition (no condition always matches)."""
        if not condition:
            return True
        return matches(condition, self.lookup, ABSENT)

    def _lookup_name(self, name: str) -> Any:
        if name in self._resolved:
            return self._resolved[name]
        if name not in self._pending:
            return ABSENT
        if name in self._resolving:
            raise InvalidWorkflowDefinition(
                f"Circular variable reference through '{name}'", variable=name
            )
        self._resolving.add(name)
        try:
            return self._resolve_value(self._pending[name])
        finally:
            self._resolving.discard(name)

    def _resolve_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self._resolve_string(value)
        if isinstance(value, dict):
            result = {}
            for key, item in value.items():
                item = self._resolve_value(item)
                if item is not ABSENT:
                    result[key] = item
            return result
        if isinstance(value, list):
            return [None if item is ABSENT else item for item in map(self._resolve_value, value)]
        return value

    def _resolve_string(self, value: str) -> Any:
        if "${" not in value:
            return value
        whole = _WHOLE_REFERENCE.match(value)
        if whole and not value.startswith("$${"):
            return self.lookup(whole.group(1))

        def interpolate(match: re.Match) -> str:
            if match.group(0) == "$${":
                return "${"
            resolved = self.lookup(match.group(1))
            if resolved is ABSENT:
                return ""
            if isinstance(resolved, str):
                return resolved
            return json.dumps(resolved, default=str)

        return _REFERENCE.sub(interpolate, value)


def _get_child(value: Any, key: str) -> Any:
    if isinstance(value, dict):
        return value.get(key, ABSENT)
    if isinstance(value, list):
        if not key.isdecimal():
            return ABSENT
        index = int(key)
        return value[index] if index < len(value) else ABSENT
    return ABSENT


def create_scope(defaults: dict[str, Any] | None, inputs: dict[str, Any] | None = None) -> Vars:
    """Build the root scope of a definition.

    ``defaults`` are the definition's declarative ``vars``; ``inputs`` are final
    values (user input, imported bindings) and take precedence over them.
    """
    inputs = inputs or {}
    pending = {name: value for name, value in (defaults or {}).items() if name not in inputs}
    return Vars(values=pending, resolved=inputs)
