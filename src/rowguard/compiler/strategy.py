"""
SQL operator compilation strategy.

Provides the ``SQLOperator`` interface, a registry, and the positional
``ParameterList`` that every operator writes its bound values into.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ..exceptions import UnsupportedOperatorError

if TYPE_CHECKING:
    from ..dialects import Dialect
    from ..operators import FilterOperator


class ParameterList:
    """
    Ordered bound values for one statement.

    ``add`` appends a value and returns the placeholder for its position,
    so placeholder numbering always matches emission order.
    """

    def __init__(self, dialect: Dialect, values: list[Any] | None = None) -> None:
        self.dialect = dialect
        self._values: list[Any] = list(values or [])

    def add(self, value: Any) -> str:
        ph = self.dialect.placeholder(len(self._values))
        self._values.append(value)
        return ph

    def extend(self, values: list[Any]) -> list[str]:
        return [self.add(v) for v in values]

    @property
    def values(self) -> tuple[Any, ...]:
        return tuple(self._values)

    def __len__(self) -> int:
        return len(self._values)


class SQLOperator(ABC):
    """
    Strategy interface for compiling a filter operator into a SQL
    predicate string.
    """

    @property
    @abstractmethod
    def name(self) -> FilterOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def apply(self, column: str, value: Any, params: ParameterList) -> str:
        """
        Build a SQL predicate.

        Args:
            column: The already-quoted column reference.
            value: The filter value; must only reach SQL through ``params``.
            params: Parameter list receiving bound values.

        Returns:
            Predicate text such as ``"status" = $1``.
        """
        ...


class SQLOperatorRegistry:
    """
    Registry of ``SQLOperator`` instances keyed by :class:`FilterOperator`.
    """

    def __init__(self) -> None:
        self._operators: dict[FilterOperator, SQLOperator] = {}

    def register(self, operator: SQLOperator) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: SQLOperator) -> None:
        for op in operators:
            self.register(op)

    def unregister(self, name: FilterOperator) -> None:
        self._operators.pop(name, None)

    def get(self, name: FilterOperator) -> SQLOperator | None:
        return self._operators.get(name)

    def has(self, name: FilterOperator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[FilterOperator]:
        return set(self._operators.keys())

    def apply(
        self,
        name: FilterOperator,
        column: str,
        value: Any,
        params: ParameterList,
    ) -> str:
        """
        Look up the operator and apply.

        Raises:
            UnsupportedOperatorError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise UnsupportedOperatorError(
                getattr(name, "value", str(name)),
                [o.value for o in self._operators],
            )
        return op.apply(column, value, params)
