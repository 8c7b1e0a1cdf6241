"""Task Service — per-task operations with the authorization guard applied.

Invariants:
    - Not-found is decided before authorization (missing id -> 404 for everyone)
    - The guard runs before any write: a forbidden caller never mutates state
    - Creation and listing need no per-task check (scoped to the caller's index)

Design Decisions:
    - Thin orchestration over TaskAccessLayer + core.authorization: the guard
      stays pure, the access layer stays authorization-agnostic
"""

from tasktracker.core.authorization import check_task_access
from tasktracker.core.domain_types import CallerId
from tasktracker.core.task_model import Comment, Task
from tasktracker.services.task_access import TaskAccessLayer


class TaskService:
    """Caller-scoped entry points used by the HTTP routes."""

    def __init__(self, access: TaskAccessLayer):
        self.access = access

    async def _authorized_task(self, caller: CallerId, task_id: str) -> Task:
        task = await self.access.get_task(task_id)
        owned = await self.access.owned_task_ids(caller)
        check_task_access(caller, task, owned)
        return task

    async def create_task(self, caller: CallerId, fields: dict) -> Task:
        return await self.access.create_task(caller, fields)

    async def list_tasks(self, caller: CallerId) -> list[Task]:
        return await self.access.list_owned_tasks(caller)

    async def get_task(self, caller: CallerId, task_id: str) -> Task:
        return await self._authorized_task(caller, task_id)

    async def update_task(
        self, caller: CallerId, task_id: str, fields: dict,
    ) -> Task:
        await self._authorized_task(caller, task_id)
        return await self.access.update_task(task_id, fields)

    async def delete_task(self, caller: CallerId, task_id: str) -> Task:
        await self._authorized_task(caller, task_id)
        return await self.access.delete_task(task_id)

    async def add_comment(
        self, caller: CallerId, task_id: str, content: object,
    ) -> Comment:
        await self._authorized_task(caller, task_id)
        return await self.access.add_comment(task_id, caller, content)
