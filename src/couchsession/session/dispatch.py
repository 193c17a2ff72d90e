# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Callback-style facade over a SessionStore.

Frameworks that drive the store through continuations rather than ``await``
use :class:`CallbackSessionStore`. Each call schedules the operation on the
running loop and returns the task; the optional callback receives
``(error, result)`` once the backend answers. Without a callback the call is
fire-and-forget and any error is dropped after being logged at debug level.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

import structlog

from couchsession.session.ports.outbound import SessionStore
from couchsession.session.types import SessionRecord

logger = structlog.get_logger("couchsession.session.dispatch")

Callback = Callable[[BaseException | None, Any], None]


class CallbackSessionStore:
    """Expose get/set/touch/destroy/all with optional ``callback(error, result)``."""

    def __init__(self, store: SessionStore) -> None:
        self._store = store
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def get(self, session_id: str, callback: Callback | None = None) -> asyncio.Task[Any]:
        return self._submit("get", self._store.get(session_id), callback)

    def set(self, session_id: str, session: SessionRecord, callback: Callback | None = None) -> asyncio.Task[Any]:
        return self._submit("set", self._store.set(session_id, session), callback)

    def touch(self, session_id: str, session: SessionRecord, callback: Callback | None = None) -> asyncio.Task[Any]:
        return self._submit("touch", self._store.touch(session_id, session), callback)

    def destroy(self, session_id: str, callback: Callback | None = None) -> asyncio.Task[Any]:
        return self._submit("destroy", self._store.destroy(session_id), callback)

    def all(self, callback: Callback | None = None) -> asyncio.Task[Any]:
        return self._submit("all", self._store.all(), callback)

    async def drain(self) -> None:
        """Wait for every in-flight operation to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _submit(
        self,
        operation: str,
        coro: Coroutine[Any, Any, Any],
        callback: Callback | None,
    ) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(lambda t: self._complete(operation, t, callback))
        return task

    @staticmethod
    def _complete(operation: str, task: asyncio.Task[Any], callback: Callback | None) -> None:
        if task.cancelled():
            error: BaseException | None = asyncio.CancelledError()
            result = None
        else:
            error = task.exception()
            result = None if error is not None else task.result()

        if callback is None:
            if error is not None:
                logger.debug("session_operation_dropped_error", operation=operation, error=repr(error))
            return
        callback(error, result)
