"""
Single-winner role selection.

With an explicit :class:`RolePriority` the highest ranked matching role
wins and unranked roles rank below every ranked one. Without one,
numeric role labels compare by value (highest wins) and any other label
falls back to the caller's role order.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RolePriority:
    """
    Explicit total order over role labels.

    ``ranks`` maps role -> rank; a larger rank wins.
    """

    ranks: Mapping[str, int] = field(default_factory=dict)

    @classmethod
    def from_order(cls, roles: Sequence[str]) -> RolePriority:
        """Build from a list ordered from highest to lowest priority."""
        size = len(roles)
        return cls({str(role): size - index for index, role in enumerate(roles)})

    @classmethod
    def coerce(cls, value: Any) -> RolePriority | None:
        if value is None or isinstance(value, RolePriority):
            return value
        if isinstance(value, Mapping):
            return cls({str(k): int(v) for k, v in value.items()})
        return cls.from_order([str(v) for v in value])

    def rank(self, role: str) -> int | None:
        return self.ranks.get(role)

    def select(self, candidates: Sequence[str]) -> str | None:
        best: str | None = None
        best_rank: int | None = None
        for role in candidates:
            rank = self.rank(role)
            if rank is None:
                continue
            if best_rank is None or rank > best_rank:
                best, best_rank = role, rank
        if best is None and candidates:
            return candidates[0]
        return best


def _numeric(label: str) -> int | None:
    try:
        return int(label.strip())
    except ValueError:
        return None


def select_role(
    candidates: Sequence[str],
    priority: RolePriority | None = None,
) -> str | None:
    """
    Pick one role out of ``candidates`` (already intersected with the
    configured roles and in caller order).
    """
    if not candidates:
        return None
    if priority is not None:
        return priority.select(candidates)
    best: str | None = None
    best_value: int | None = None
    for role in candidates:
        value = _numeric(role)
        if value is not None and (best_value is None or value > best_value):
            best, best_value = role, value
    return best if best is not None else candidates[0]


__all__ = ["RolePriority", "select_role"]
