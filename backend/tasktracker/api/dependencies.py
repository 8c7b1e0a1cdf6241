"""Request Dependencies — caller identity, host clock and the task maps, injected per request.

Invariants:
    - Caller identity comes only from the hosting environment's header; absent
      header means the anonymous identity (never an error); longer than the
      user_tasks key column allows means 400
    - The clock is the sole time source for the core
    - Memory backend: the same maps for every request (built once at startup);
      database backend: maps bound to one session per request

Design Decisions:
    - Everything the core needs arrives through Depends: tests override
      get_task_maps / get_clock instead of patching globals
"""

from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import Depends, Request

from tasktracker.config import get_settings
from tasktracker.core.domain_types import CallerId, Clock
from tasktracker.core.errors import TaskValidationError
from tasktracker.core.task_fields import MAX_CALLER_ID_LENGTH
from tasktracker.infrastructure import database
from tasktracker.infrastructure.kv_store import TaskMaps, sql_task_maps
from tasktracker.services.key_locks import KeyedLocks
from tasktracker.services.task_access import TaskAccessLayer
from tasktracker.services.task_service import TaskService

# Shared by every request: the index and task locks must span sessions
_key_locks = KeyedLocks()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_clock() -> Clock:
    return utc_now


def get_caller(request: Request) -> CallerId:
    """Opaque caller identity, used verbatim. Over-long identities are a 400."""
    settings = get_settings()
    caller = request.headers.get(settings.caller_header, "").strip()
    if not caller:
        return CallerId(settings.anonymous_caller)
    if len(caller) > MAX_CALLER_ID_LENGTH:
        raise TaskValidationError(
            f"{settings.caller_header} exceeds {MAX_CALLER_ID_LENGTH} characters",
            settings.caller_header,
        )
    return CallerId(caller)


async def get_task_maps(request: Request) -> AsyncGenerator[TaskMaps, None]:
    memory_maps: TaskMaps | None = getattr(request.app.state, "memory_maps", None)
    if memory_maps is not None:
        yield memory_maps
        return
    if not database.db_manager:
        raise RuntimeError("Database not initialized")
    async with database.db_manager.session() as db:
        yield sql_task_maps(db)


def get_key_locks() -> KeyedLocks:
    return _key_locks


def get_access_layer(
    maps: TaskMaps = Depends(get_task_maps),
    clock: Clock = Depends(get_clock),
    locks: KeyedLocks = Depends(get_key_locks),
) -> TaskAccessLayer:
    return TaskAccessLayer(maps.task_store, maps.user_index, clock, locks=locks)


def get_task_service(
    access: TaskAccessLayer = Depends(get_access_layer),
) -> TaskService:
    return TaskService(access)
