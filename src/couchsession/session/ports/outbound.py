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
"""Session store and document client protocols."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Protocol, runtime_checkable

from couchsession.session.types import SessionRecord


@runtime_checkable
class SessionStore(Protocol):
    """Session persistence interface consumed by web frameworks.

    ``get`` returns ``None`` for unknown sessions. ``touch`` refreshes the
    expiry of an existing record without rewriting its content.
    """

    async def get(self, session_id: str) -> Any | None: ...

    async def set(self, session_id: str, session: SessionRecord) -> None: ...

    async def touch(self, session_id: str, session: SessionRecord) -> None: ...

    async def destroy(self, session_id: str) -> None: ...

    async def all(self) -> list[Any]: ...

    async def disconnect(self, error: BaseException | None = None) -> None: ...


@runtime_checkable
class DocumentClient(Protocol):
    """Key-value document operations the session store delegates to.

    Implementations raise the driver's own exceptions; a missing key raises
    ``couchbase.exceptions.DocumentNotFoundException``. ``expiry`` is in
    seconds, ``0`` meaning no expiry.
    """

    async def get(self, key: str, *, timeout: timedelta) -> bytes | str | None: ...

    async def upsert(self, key: str, value: str, *, expiry: int, timeout: timedelta) -> None: ...

    async def touch(self, key: str, expiry: int, *, timeout: timedelta) -> None: ...

    async def remove(self, key: str, *, timeout: timedelta) -> None: ...

    async def query(
        self,
        statement: str,
        params: dict[str, Any],
        *,
        read_only: bool,
        timeout: timedelta,
    ) -> list[Any]: ...

    async def close(self) -> None: ...
