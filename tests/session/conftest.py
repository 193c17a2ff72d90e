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
"""Shared fakes for session store tests."""

from __future__ import annotations

import json
from datetime import timedelta
from typing import Any

import pytest
from couchbase.exceptions import DocumentNotFoundException

from couchsession.config.properties.store import SessionStoreProperties
from couchsession.eda.adapters.memory import InMemoryEventBus
from couchsession.eda.types import EventEnvelope
from couchsession.session.adapters.couchbase import CouchbaseSessionStore


class FakeDocumentClient:
    """Minimal in-memory stand-in for a Couchbase collection.

    Missing keys raise ``DocumentNotFoundException`` like the real driver.
    ``query`` ignores the statement and filters on the ``prefix`` parameter.
    """

    def __init__(self) -> None:
        self.documents: dict[str, bytes] = {}
        self.expiries: dict[str, int] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.closed = False
        self.fail_with: BaseException | None = None

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def get(self, key: str, *, timeout: timedelta) -> bytes | str | None:
        self.calls.append(("get", key, timeout))
        self._maybe_fail()
        if key not in self.documents:
            raise DocumentNotFoundException()
        return self.documents[key]

    async def upsert(self, key: str, value: str, *, expiry: int, timeout: timedelta) -> None:
        self.calls.append(("upsert", key, value, expiry, timeout))
        self._maybe_fail()
        self.documents[key] = value.encode()
        self.expiries[key] = expiry

    async def touch(self, key: str, expiry: int, *, timeout: timedelta) -> None:
        self.calls.append(("touch", key, expiry, timeout))
        self._maybe_fail()
        if key not in self.documents:
            raise DocumentNotFoundException()
        self.expiries[key] = expiry

    async def remove(self, key: str, *, timeout: timedelta) -> None:
        self.calls.append(("remove", key, timeout))
        self._maybe_fail()
        if key not in self.documents:
            raise DocumentNotFoundException()
        del self.documents[key]
        self.expiries.pop(key, None)

    async def query(
        self,
        statement: str,
        params: dict[str, Any],
        *,
        read_only: bool,
        timeout: timedelta,
    ) -> list[Any]:
        self.calls.append(("query", statement, params, read_only, timeout))
        self._maybe_fail()
        prefix = params["prefix"]
        return [json.loads(v) for k, v in sorted(self.documents.items()) if k.startswith(prefix)]

    async def close(self) -> None:
        self.closed = True


class RecordingHandler:
    """Async event handler that keeps every envelope it receives."""

    def __init__(self) -> None:
        self.events: list[EventEnvelope] = []

    async def __call__(self, event: EventEnvelope) -> None:
        self.events.append(event)

    @property
    def types(self) -> list[str]:
        return [e.event_type for e in self.events]


@pytest.fixture
def fake_client() -> FakeDocumentClient:
    return FakeDocumentClient()


@pytest.fixture
def bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def store(fake_client: FakeDocumentClient, bus: InMemoryEventBus) -> CouchbaseSessionStore:
    return CouchbaseSessionStore(fake_client, SessionStoreProperties(), events=bus)


@pytest.fixture
def recorder(bus: InMemoryEventBus) -> RecordingHandler:
    handler = RecordingHandler()
    bus.subscribe("session.store.*", handler)
    return handler
