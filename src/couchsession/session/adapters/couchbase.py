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
"""Couchbase-backed session store.

Import and connect::

    from couchsession.session.adapters.couchbase import CouchbaseSessionStore

    store = await CouchbaseSessionStore.connect(properties, events=bus)
    await store.set("123", {"cookie": {"maxAge": 2000}, "name": "cm"})
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

import structlog
from acouchbase.cluster import Cluster
from couchbase.auth import PasswordAuthenticator
from couchbase.exceptions import DocumentNotFoundException
from couchbase.options import (
    ClusterOptions,
    ClusterTimeoutOptions,
    GetOptions,
    QueryOptions,
    RemoveOptions,
    TouchOptions,
    UpsertOptions,
)
from couchbase.transcoder import RawJSONTranscoder

from couchsession.config.properties.store import SessionStoreProperties
from couchsession.eda.adapters.memory import InMemoryEventBus
from couchsession.eda.ports.outbound import EventPublisher
from couchsession.kernel.exceptions import StoreClosedException, StoreConnectionException
from couchsession.session.ports.outbound import DocumentClient
from couchsession.session.serialization import decode_session, encode_session
from couchsession.session.ttl import resolve_ttl
from couchsession.session.types import (
    CONNECT_EVENT,
    DISCONNECT_EVENT,
    EVENT_DESTINATION,
    SessionRecord,
)

logger = structlog.get_logger("couchsession.session.couchbase")

_TRANSCODER = RawJSONTranscoder()


def build_list_query(bucket: str, prefix: str) -> tuple[str, dict[str, Any]]:
    """Return the read-only statement listing every document under *prefix*."""
    keyspace = "`" + bucket.replace("`", "``") + "`"
    statement = (
        f"SELECT {keyspace}.* FROM {keyspace} "
        f"WHERE SUBSTR(META({keyspace}).id, 0, $prefix_length) = $prefix"
    )
    return statement, {"prefix_length": len(prefix), "prefix": prefix}


class CouchbaseDocumentClient:
    """DocumentClient over an ``acouchbase`` cluster and collection.

    Documents are written with ``RawJSONTranscoder``: the value handed to
    :meth:`upsert` is already JSON text and is stored as the document body,
    so N1QL sees a regular JSON document.
    """

    def __init__(self, cluster: Any, collection: Any) -> None:
        self._cluster = cluster
        self._collection = collection

    @classmethod
    async def connect(cls, properties: SessionStoreProperties) -> CouchbaseDocumentClient:
        """Open the cluster, the bucket and the configured collection."""
        authenticator = PasswordAuthenticator(properties.effective_username, properties.password or "")
        if properties.connection_timeout:
            options = ClusterOptions(
                authenticator,
                timeout_options=ClusterTimeoutOptions(
                    connect_timeout=timedelta(milliseconds=properties.connection_timeout),
                ),
            )
        else:
            options = ClusterOptions(authenticator)

        if properties.cachefile:
            logger.debug("cachefile_ignored", cachefile=properties.cachefile)

        cluster = await Cluster.connect(properties.connection_string(), options)
        try:
            bucket = cluster.bucket(properties.bucket)
            await bucket.on_connect()
            if properties.collection_name:
                collection = bucket.collection(properties.collection_name)
            else:
                collection = bucket.default_collection()
        except BaseException:
            await cluster.close()
            raise
        return cls(cluster, collection)

    async def get(self, key: str, *, timeout: timedelta) -> bytes | str | None:
        result = await self._collection.get(key, GetOptions(timeout=timeout, transcoder=_TRANSCODER))
        return result.value

    async def upsert(self, key: str, value: str, *, expiry: int, timeout: timedelta) -> None:
        await self._collection.upsert(
            key,
            value,
            UpsertOptions(expiry=timedelta(seconds=expiry), timeout=timeout, transcoder=_TRANSCODER),
        )

    async def touch(self, key: str, expiry: int, *, timeout: timedelta) -> None:
        await self._collection.touch(key, timedelta(seconds=expiry), TouchOptions(timeout=timeout))

    async def remove(self, key: str, *, timeout: timedelta) -> None:
        await self._collection.remove(key, RemoveOptions(timeout=timeout))

    async def query(
        self,
        statement: str,
        params: dict[str, Any],
        *,
        read_only: bool,
        timeout: timedelta,
    ) -> list[Any]:
        result = self._cluster.query(
            statement,
            QueryOptions(named_parameters=params, read_only=read_only, timeout=timeout),
        )
        return [row async for row in result.rows()]

    async def close(self) -> None:
        await self._cluster.close()


class CouchbaseSessionStore:
    """Session store persisting JSON session records in Couchbase.

    Keys are ``prefix + session_id`` (``"sess:"`` by default). The expiry of
    each record is the configured ``ttl``, else ``cookie.maxAge`` in whole
    seconds, else ``default_ttl``.

    Constructing the store directly with a :class:`DocumentClient` uses that
    client as-is. :meth:`connect` opens a new connection and publishes
    ``session.store.connect`` once the store is usable.
    """

    def __init__(
        self,
        client: DocumentClient,
        properties: SessionStoreProperties | None = None,
        *,
        events: EventPublisher | None = None,
    ) -> None:
        self._client = client
        self._properties = properties or SessionStoreProperties()
        self._events: EventPublisher = events or InMemoryEventBus()
        self._prefix = self._properties.key_prefix
        self._timeout = timedelta(milliseconds=self._properties.effective_operation_timeout)
        self._query_all, self._query_params = build_list_query(self._properties.bucket, self._prefix)
        self._closed = False

    @classmethod
    async def connect(
        cls,
        properties: SessionStoreProperties,
        *,
        events: EventPublisher | None = None,
    ) -> CouchbaseSessionStore:
        """Connect to the cluster and return a ready store.

        On any failure ``session.store.disconnect`` is published with the
        error and :class:`StoreConnectionException` is raised.
        """
        events = events or InMemoryEventBus()
        try:
            client = await CouchbaseDocumentClient.connect(properties)
        except Exception as exc:
            logger.error(
                "session_store_connect_failed",
                bucket=properties.bucket,
                connection_string=properties.connection_string(),
                error=str(exc),
            )
            await events.publish(EVENT_DESTINATION, DISCONNECT_EVENT, {"bucket": properties.bucket, "error": exc})
            raise StoreConnectionException(
                f"Could not connect to couchbase with bucket: {properties.bucket}",
                code="STORE_CONNECT",
                context={"bucket": properties.bucket},
            ) from exc

        store = cls(client, properties, events=events)
        logger.info("session_store_connected", bucket=properties.bucket)
        await events.publish(EVENT_DESTINATION, CONNECT_EVENT, {"bucket": properties.bucket})
        return store

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def properties(self) -> SessionStoreProperties:
        return self._properties

    @property
    def events(self) -> EventPublisher:
        return self._events

    @property
    def query_all(self) -> str:
        return self._query_all

    @property
    def closed(self) -> bool:
        return self._closed

    def _key(self, session_id: str) -> str:
        return f"{self._prefix}{session_id}"

    def _ttl(self, session: Any) -> int:
        return resolve_ttl(session, self._properties.ttl, self._properties.default_ttl)

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreClosedException("Session store is disconnected", code="STORE_CLOSED")

    async def get(self, session_id: str) -> Any | None:
        """Fetch and decode a session. Returns ``None`` if it does not exist."""
        self._ensure_open()
        key = self._key(session_id)
        logger.debug("session_get", key=key)
        try:
            raw = await self._client.get(key, timeout=self._timeout)
        except DocumentNotFoundException:
            return None
        if not raw:
            return None
        return decode_session(raw, key)

    async def set(self, session_id: str, session: SessionRecord) -> None:
        """Store *session*, replacing any previous record, with a fresh expiry."""
        self._ensure_open()
        key = self._key(session_id)
        payload = encode_session(session)
        ttl = self._ttl(session)
        logger.debug("session_set", key=key, ttl=ttl)
        await self._client.upsert(key, payload, expiry=ttl, timeout=self._timeout)

    async def touch(self, session_id: str, session: SessionRecord) -> None:
        """Extend the expiry of an existing session without rewriting it."""
        self._ensure_open()
        key = self._key(session_id)
        ttl = self._ttl(session)
        logger.debug("session_touch", key=key, ttl=ttl)
        await self._client.touch(key, ttl, timeout=self._timeout)

    async def destroy(self, session_id: str) -> None:
        """Remove a session. A missing session raises the driver's not-found error."""
        self._ensure_open()
        key = self._key(session_id)
        logger.debug("session_destroy", key=key)
        await self._client.remove(key, timeout=self._timeout)

    async def all(self) -> list[Any]:
        """Return the raw rows of every session stored under the prefix."""
        self._ensure_open()
        return await self._client.query(
            self._query_all,
            self._query_params,
            read_only=True,
            timeout=self._timeout,
        )

    async def disconnect(self, error: BaseException | None = None) -> None:
        """Close the connection and publish ``session.store.disconnect``."""
        if self._closed:
            return
        self._closed = True
        try:
            await self._client.close()
        finally:
            logger.info("session_store_disconnected", bucket=self._properties.bucket)
            await self._events.publish(
                EVENT_DESTINATION,
                DISCONNECT_EVENT,
                {"bucket": self._properties.bucket, "error": error},
            )
