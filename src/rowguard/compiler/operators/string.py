"""Anchored string operators, all rendered as ``LIKE``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...operators import FilterOperator
from ..strategy import SQLOperator

if TYPE_CHECKING:
    from ..strategy import ParameterList


def _text(value: Any) -> str:
    return "" if value is None else str(value)


class ContainsOperator(SQLOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.CONTAINS

    def apply(self, column: str, value: Any, params: ParameterList) -> str:
        return f"{column} LIKE {params.add(f'%{_text(value)}%')}"


class StartsWithOperator(SQLOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.STARTSWITH

    def apply(self, column: str, value: Any, params: ParameterList) -> str:
        return f"{column} LIKE {params.add(f'{_text(value)}%')}"


class EndsWithOperator(SQLOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.ENDSWITH

    def apply(self, column: str, value: Any, params: ParameterList) -> str:
        return f"{column} LIKE {params.add(f'%{_text(value)}')}"
