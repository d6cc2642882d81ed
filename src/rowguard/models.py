"""
Request and result value types shared by every compilation stage.

``Filter`` and ``FilterGroup`` describe *what* rows to match;
``QueryOptions`` describes *how* results are shaped (ordering,
pagination, projection). ``CompiledStatement`` is the only thing that
ever leaves the compiler: SQL text plus its positional parameters.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from .exceptions import ValidationError
from .operators import Combinator, FilterOperator, SortDirection


@dataclass(frozen=True)
class Filter:
    """A single ``field <operator> value`` predicate."""

    field: str
    operator: FilterOperator = FilterOperator.EQ
    value: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "operator", FilterOperator.parse(self.operator))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Filter:
        """Build from ``{"field", "operator"|"op", "value"}``."""
        if "field" not in data:
            raise ValidationError({"field": ["Filter is missing 'field'"]})
        return cls(
            field=str(data["field"]),
            operator=data.get("operator", data.get("op")),
            value=data.get("value"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "operator": self.operator.value,
            "value": self.value,
        }


@dataclass(frozen=True)
class FilterGroup:
    """
    Filters joined by one combinator and emitted as one parenthesized
    sub-clause. Groups do not nest.
    """

    filters: tuple[Filter, ...] = ()
    combinator: Combinator = Combinator.OR

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", tuple(self.filters))
        object.__setattr__(self, "combinator", Combinator.parse(self.combinator))
        for item in self.filters:
            if not isinstance(item, Filter):
                raise ValidationError(
                    {"filters": ["Filter groups may only contain plain filters"]}
                )

    def to_dict(self) -> dict[str, Any]:
        return {
            "combinator": self.combinator.value,
            "filters": [f.to_dict() for f in self.filters],
        }


FilterLike = Union[Filter, FilterGroup]


def coerce_filters(
    filters: Sequence[FilterLike | Mapping[str, Any]] | None,
) -> list[FilterLike]:
    """Accept filters as objects or plain mappings, preserving order."""
    if not filters:
        return []
    result: list[FilterLike] = []
    for item in filters:
        if isinstance(item, (Filter, FilterGroup)):
            result.append(item)
        elif isinstance(item, Mapping):
            result.append(Filter.from_dict(item))
        else:
            raise ValidationError(
                {"filters": [f"Unsupported filter type: {type(item).__name__}"]}
            )
    return result


@dataclass(frozen=True)
class SortField:
    field: str
    direction: SortDirection = SortDirection.ASC

    def __post_init__(self) -> None:
        object.__setattr__(self, "direction", SortDirection.normalize(self.direction))

    @classmethod
    def parse(cls, value: SortField | str | Mapping[str, Any]) -> SortField:
        """
        Accept a ``SortField``, a mapping with ``field`` and
        ``direction``/``dir``, or a string where a leading ``-`` means
        descending.
        """
        if isinstance(value, SortField):
            return value
        if isinstance(value, Mapping):
            return cls(
                field=str(value["field"]),
                direction=value.get("direction", value.get("dir")),
            )
        text = str(value)
        if text.startswith("-"):
            return cls(field=text[1:], direction=SortDirection.DESC)
        return cls(field=text)


def _check_non_negative(name: str, value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError({name: [f"{name} must be an integer"]})
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError({name: [f"{name} must be an integer"]}) from None
    if number != value and not isinstance(value, str):
        raise ValidationError({name: [f"{name} must be an integer"]})
    if number < 0:
        raise ValidationError({name: [f"{name} must not be negative"]})
    return number


@dataclass(frozen=True)
class QueryOptions:
    """
    Immutable container for result-shaping parameters.

    Attributes:
        order_by: Ordering, applied in sequence.
        limit: Maximum number of rows.
        offset: Number of rows to skip.
        select_fields: Columns to project; empty means ``*``.
    """

    order_by: tuple[SortField, ...] = ()
    limit: int | None = None
    offset: int | None = None
    select_fields: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "order_by", tuple(SortField.parse(o) for o in self.order_by)
        )
        object.__setattr__(self, "select_fields", tuple(self.select_fields))
        object.__setattr__(self, "limit", _check_non_negative("limit", self.limit))
        object.__setattr__(self, "offset", _check_non_negative("offset", self.offset))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> QueryOptions:
        """Build from ``{"orderBy"|"order_by", "limit", "offset", "select"}``."""
        if not data:
            return cls()
        order_by = data.get("order_by", data.get("orderBy")) or ()
        select = data.get("select_fields", data.get("select")) or ()
        if isinstance(select, str):
            select = (select,)
        return cls(
            order_by=tuple(order_by),
            limit=data.get("limit"),
            offset=data.get("offset"),
            select_fields=tuple(select),
        )

    def with_pagination(
        self,
        limit: int | None = None,
        offset: int | None = None,
    ) -> QueryOptions:
        """Return a copy with updated pagination parameters."""
        return QueryOptions(
            order_by=self.order_by,
            limit=limit if limit is not None else self.limit,
            offset=offset if offset is not None else self.offset,
            select_fields=self.select_fields,
        )

    def with_ordering(self, *fields: SortField | str) -> QueryOptions:
        """Return a copy with the ordering replaced."""
        return QueryOptions(
            order_by=tuple(fields),
            limit=self.limit,
            offset=self.offset,
            select_fields=self.select_fields,
        )

    def merge(self, other: QueryOptions) -> QueryOptions:
        """
        Merge two ``QueryOptions`` instances.

        - ``other``'s limit/offset override ``self``'s if set.
        - Ordering and projections are concatenated (``other`` appended).
        """
        return QueryOptions(
            order_by=self.order_by + other.order_by,
            limit=other.limit if other.limit is not None else self.limit,
            offset=other.offset if other.offset is not None else self.offset,
            select_fields=self.select_fields + other.select_fields,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dictionary."""
        result: dict[str, Any] = {}
        if self.order_by:
            result["order_by"] = [
                {"field": o.field, "direction": o.direction.value}
                for o in self.order_by
            ]
        if self.limit is not None:
            result["limit"] = self.limit
        if self.offset is not None:
            result["offset"] = self.offset
        if self.select_fields:
            result["select_fields"] = list(self.select_fields)
        return result


class StatementKind(str, Enum):
    SELECT = "select"
    COUNT = "count"
    FIND_BY_ID = "find_by_id"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    DDL = "ddl"

    @property
    def returns_rows(self) -> bool:
        return self in (
            StatementKind.SELECT,
            StatementKind.COUNT,
            StatementKind.FIND_BY_ID,
        )


@dataclass(frozen=True)
class CompiledStatement:
    """SQL text plus positional parameters, ready for the execution engine."""

    sql: str
    params: tuple[Any, ...] = ()
    kind: StatementKind = StatementKind.SELECT
    table: str | None = None
    id_column: str | None = None
    returning: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", tuple(self.params))

    def as_tuple(self) -> tuple[str, list[Any]]:
        return self.sql, list(self.params)


__all__ = [
    "CompiledStatement",
    "Filter",
    "FilterGroup",
    "FilterLike",
    "QueryOptions",
    "SortField",
    "StatementKind",
    "coerce_filters",
]
