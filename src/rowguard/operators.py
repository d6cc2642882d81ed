from __future__ import annotations

from enum import Enum
from typing import Any

from .exceptions import UnsupportedOperatorError


class FilterOperator(str, Enum):
    """Supported operators for filters and row restrictions."""

    # Standard comparison
    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"

    # Set membership
    IN = "in"
    NIN = "nin"

    # String operations
    LIKE = "like"
    CONTAINS = "contains"
    STARTSWITH = "startswith"
    ENDSWITH = "endswith"

    # Null checks
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"

    @classmethod
    def parse(cls, value: FilterOperator | str | None) -> FilterOperator:
        """
        Coerce an operator name or symbol into a ``FilterOperator``.

        ``None`` means the default (``eq``). Unknown names raise
        :class:`UnsupportedOperatorError`.
        """
        if value is None:
            return cls.EQ
        if isinstance(value, cls):
            return value
        key = str(value).strip()
        alias = _ALIASES.get(key) or _ALIASES.get(key.lower())
        if alias is not None:
            return alias
        try:
            return cls(key.lower())
        except ValueError:
            raise UnsupportedOperatorError(
                key, [op.value for op in cls]
            ) from None

    @property
    def takes_value(self) -> bool:
        return self not in (FilterOperator.IS_NULL, FilterOperator.IS_NOT_NULL)


_ALIASES: dict[str, FilterOperator] = {
    "=": FilterOperator.EQ,
    "==": FilterOperator.EQ,
    "!=": FilterOperator.NEQ,
    "<>": FilterOperator.NEQ,
    "ne": FilterOperator.NEQ,
    ">": FilterOperator.GT,
    "<": FilterOperator.LT,
    ">=": FilterOperator.GTE,
    "ge": FilterOperator.GTE,
    "<=": FilterOperator.LTE,
    "le": FilterOperator.LTE,
    "not_in": FilterOperator.NIN,
    "notin": FilterOperator.NIN,
    "isnull": FilterOperator.IS_NULL,
    "notnull": FilterOperator.IS_NOT_NULL,
    "isnotnull": FilterOperator.IS_NOT_NULL,
}


class Combinator(str, Enum):
    """How the conditions of a restriction group are joined."""

    AND = "AND"
    OR = "OR"

    @classmethod
    def parse(cls, value: Combinator | str | None) -> Combinator:
        if value is None:
            return cls.AND
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise UnsupportedOperatorError(
                str(value), [c.value for c in cls]
            ) from None


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def normalize(cls, value: Any) -> SortDirection:
        """Anything other than a case-insensitive ``desc`` sorts ascending."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().upper() == "DESC":
            return cls.DESC
        return cls.ASC
