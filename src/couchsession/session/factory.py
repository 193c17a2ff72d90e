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
"""Session store construction from configuration."""

from __future__ import annotations

from couchsession.config.properties.store import SessionStoreProperties
from couchsession.core.config import Config
from couchsession.eda.ports.outbound import EventPublisher
from couchsession.session.adapters.couchbase import CouchbaseSessionStore
from couchsession.session.ports.outbound import DocumentClient


async def create_session_store(
    config: Config,
    *,
    events: EventPublisher | None = None,
    client: DocumentClient | None = None,
) -> CouchbaseSessionStore:
    """Bind ``couchsession.store.*`` and return a ready store.

    A pre-built *client* is used directly; otherwise a new connection is
    opened and ``session.store.connect`` is published on success.
    """
    properties = config.bind(SessionStoreProperties)
    if client is not None:
        return CouchbaseSessionStore(client, properties, events=events)
    return await CouchbaseSessionStore.connect(properties, events=events)
