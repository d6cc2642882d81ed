"""Null checks. These bind no parameters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...operators import FilterOperator
from ..strategy import SQLOperator

if TYPE_CHECKING:
    from ..strategy import ParameterList


class IsNullOperator(SQLOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IS_NULL

    def apply(self, column: str, value: Any, params: ParameterList) -> str:
        return f"{column} IS NULL"


class IsNotNullOperator(SQLOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IS_NOT_NULL

    def apply(self, column: str, value: Any, params: ParameterList) -> str:
        return f"{column} IS NOT NULL"
