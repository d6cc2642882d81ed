"""
Entity gateway: compile a scoped statement, run it, shape the result.

Update and delete by id treat zero affected rows as
:class:`RecordNotFoundError`. Because writes carry the same tenant and
row-restriction filters as reads, a row outside the caller's scope is
indistinguishable from a missing one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .exceptions import PolicyMismatchError, RecordNotFoundError
from .rls.resolver import context_roles

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .access import AccessCompiler, AccessRequest
    from .execution import SQLExecutor
    from .rls.resolver import ResolvedPolicy

logger = logging.getLogger(__name__)


class EntityGateway:
    def __init__(
        self,
        access: AccessCompiler,
        executor: SQLExecutor,
        *,
        deny_unmatched_roles: bool = False,
    ) -> None:
        self.access = access
        self.executor = executor
        self.deny_unmatched_roles = deny_unmatched_roles

    def policy(self, request: AccessRequest) -> ResolvedPolicy:
        """
        Resolve the row policy for ``request``.

        Raises:
            PolicyMismatchError: ``deny_unmatched_roles`` is set, restrictions
                are configured, and none applies to the caller's roles.
        """
        policy = self.access.resolve_policy(request)
        if (
            self.deny_unmatched_roles
            and not policy.matched
            and self.access.policies.role_restrictions
        ):
            roles = list(context_roles(request.context))
            logger.info("Denied %s access for roles %s", request.table, roles)
            raise PolicyMismatchError(roles)
        return policy

    # -- reads ---------------------------------------------------------------

    async def find(self, request: AccessRequest) -> list[dict[str, Any]]:
        statement = self.access.compile_select(request, policy=self.policy(request))
        return await self.executor.query(statement.sql, statement.params)

    async def find_by_id(
        self, request: AccessRequest, record_id: Any
    ) -> dict[str, Any] | None:
        statement = self.access.compile_find_by_id(
            request, record_id, policy=self.policy(request)
        )
        rows = await self.executor.query(statement.sql, statement.params)
        return rows[0] if rows else None

    async def count(self, request: AccessRequest) -> int:
        statement = self.access.compile_count(request, policy=self.policy(request))
        rows = await self.executor.query(statement.sql, statement.params)
        return int(rows[0]["count"]) if rows else 0

    # -- writes --------------------------------------------------------------

    async def insert(
        self, request: AccessRequest, data: Mapping[str, Any]
    ) -> dict[str, Any]:
        """
        Insert one row and return it: the ``RETURNING`` row where the
        dialect has one, otherwise the written values plus the generated id.
        """
        self.policy(request)
        statement = self.access.compile_insert(request, data)
        if statement.returning:
            rows = await self.executor.query(statement.sql, statement.params)
            if rows:
                return rows[0]
            return dict(data)
        result = await self.executor.execute(statement.sql, statement.params)
        record = dict(data)
        if result.last_insert_id is not None and request.id_column not in record:
            record[request.id_column] = result.last_insert_id
        return record

    async def update(
        self, request: AccessRequest, record_id: Any, data: Mapping[str, Any]
    ) -> dict[str, Any]:
        statement = self.access.compile_update(
            request, record_id, data, policy=self.policy(request)
        )
        result = await self.executor.execute(statement.sql, statement.params)
        if result.changes == 0:
            raise RecordNotFoundError(request.table, record_id)
        return {request.id_column: record_id, **data}

    async def delete(self, request: AccessRequest, record_id: Any) -> None:
        statement = self.access.compile_delete(
            request, record_id, policy=self.policy(request)
        )
        result = await self.executor.execute(statement.sql, statement.params)
        if result.changes == 0:
            raise RecordNotFoundError(request.table, record_id)
        logger.debug("Deleted %s id=%r", request.table, record_id)


__all__ = ["EntityGateway"]
