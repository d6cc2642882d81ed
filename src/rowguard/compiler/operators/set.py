"""Set operators: in, nin."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from ...exceptions import ValidationError
from ...operators import FilterOperator
from ..strategy import SQLOperator

if TYPE_CHECKING:
    from ..strategy import ParameterList


def as_value_list(value: Any) -> list[Any]:
    """
    ``None`` is the empty set; a scalar is a set of one.

    Sets are sorted so the bound parameters do not follow hash order;
    mappings are rejected rather than binding their keys.
    """
    if value is None:
        return []
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return [value]
    if isinstance(value, Mapping):
        raise ValidationError(
            f"Set operators take a list of values, not a {type(value).__name__}"
        )
    if isinstance(value, (set, frozenset)):
        try:
            return sorted(value)
        except TypeError:
            return sorted(value, key=repr)
    return list(value)


class InOperator(SQLOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IN

    def apply(self, column: str, value: Any, params: ParameterList) -> str:
        values = as_value_list(value)
        # an empty inclusion set matches nothing
        if not values:
            return "1=0"
        return f"{column} IN ({', '.join(params.extend(values))})"


class NotInOperator(SQLOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NIN

    def apply(self, column: str, value: Any, params: ParameterList) -> str:
        values = as_value_list(value)
        # an empty exclusion set excludes nothing
        if not values:
            return "1=1"
        return f"{column} NOT IN ({', '.join(params.extend(values))})"
