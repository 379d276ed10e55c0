"""
Structured builder for the Drive search query language.

Queries are small expression trees of ``Field``, ``Literal`` and ``Term``
atoms which serialize to strings such as ``name contains 'pwsafe.kdbx'``.
See https://developers.google.com/drive/api/guides/ref-search-terms

Example:
    query = name_contains("pwsafe") & in_parents("root")
    query.to_query()  # "name contains 'pwsafe' and 'root' in parents"
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from ...exceptions import UnsupportedValueKind

_ESCAPE_PATTERN = re.compile(r"['\\]")


class Operator(Enum):
    """Operators supported by the query builder, valued by their textual token."""
    CONTAINS = "contains"
    EQUALS = "="
    IN = "in"
    AND = "and"


@dataclass(frozen=True)
class Field:
    """A Drive file field such as ``name`` or ``parents``. Serialized unquoted."""
    name: str

    def to_query(self) -> str:
        return to_query(self)


@dataclass(frozen=True)
class Literal:
    """
    A literal value: a string or a (possibly nested) list or tuple of strings.

    Lists are stored as tuples so literals stay hashable and unaffected by
    later changes to the list they were built from.

    Raises:
        UnsupportedValueKind: If the value, or any nested element, is of another kind.
    """
    value: Any

    def __post_init__(self):
        _validate_value(self.value)
        object.__setattr__(self, "value", _freeze(self.value))

    def to_query(self) -> str:
        return to_query(self)


@dataclass(frozen=True)
class Term:
    """Binds two atoms with an operator, e.g. ``'root' in parents``."""
    left: "QueryAtom"
    operator: Operator
    right: "QueryAtom"

    def __and__(self, other: "Term") -> "Term":
        return Term(self, Operator.AND, other)

    def to_query(self) -> str:
        return to_query(self)


QueryAtom = Union[Field, Literal, Term]


def _validate_value(value: Any) -> None:
    if isinstance(value, str):
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            _validate_value(item)
        return
    raise UnsupportedValueKind(f"Unsupported literal type: {type(value).__name__}")


def _freeze(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _quote_value(value: Any) -> str:
    if isinstance(value, str):
        escaped = _ESCAPE_PATTERN.sub(lambda match: "\\" + match.group(0), value)
        return f"'{escaped}'"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_quote_value(item) for item in value) + "]"
    raise UnsupportedValueKind(f"Unsupported literal type: {type(value).__name__}")


def to_query(atom: QueryAtom) -> str:
    """
    Serialize a query atom to the Drive query language.

    Args:
        atom: The Field, Literal or Term to serialize.

    Returns:
        The query string.
    """
    if isinstance(atom, Field):
        return atom.name
    if isinstance(atom, Literal):
        return _quote_value(atom.value)
    if isinstance(atom, Term):
        return f"{to_query(atom.left)} {atom.operator.value} {to_query(atom.right)}"
    raise UnsupportedValueKind(f"Not a query atom: {type(atom).__name__}")


def name_contains(pattern: str) -> Term:
    """Files whose name contains ``pattern``."""
    return Term(Field("name"), Operator.CONTAINS, Literal(pattern))


def in_parents(parent_id: str) -> Term:
    """Direct children of the folder with id ``parent_id``."""
    return Term(Literal(parent_id), Operator.IN, Field("parents"))
