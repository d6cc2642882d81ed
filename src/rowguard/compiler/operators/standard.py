"""Standard comparison operators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from ...operators import FilterOperator
from ..strategy import SQLOperator

if TYPE_CHECKING:
    from ..strategy import ParameterList


class ComparisonOperator(SQLOperator):
    operator: ClassVar[FilterOperator]
    symbol: ClassVar[str]

    @property
    def name(self) -> FilterOperator:
        return self.operator

    def apply(self, column: str, value: Any, params: ParameterList) -> str:
        return f"{column} {self.symbol} {params.add(value)}"


class EqualOperator(ComparisonOperator):
    operator = FilterOperator.EQ
    symbol = "="


class NotEqualOperator(ComparisonOperator):
    operator = FilterOperator.NEQ
    symbol = "!="


class GreaterThanOperator(ComparisonOperator):
    operator = FilterOperator.GT
    symbol = ">"


class LessThanOperator(ComparisonOperator):
    operator = FilterOperator.LT
    symbol = "<"


class GreaterEqualOperator(ComparisonOperator):
    operator = FilterOperator.GTE
    symbol = ">="


class LessEqualOperator(ComparisonOperator):
    operator = FilterOperator.LTE
    symbol = "<="


class LikeOperator(ComparisonOperator):
    operator = FilterOperator.LIKE
    symbol = "LIKE"
