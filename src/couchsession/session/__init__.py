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
"""couchsession session — Couchbase-backed session persistence.

Import the concrete store from the adapter package::

    from couchsession.session.adapters.couchbase import CouchbaseSessionStore
"""

from couchsession.session.dispatch import CallbackSessionStore
from couchsession.session.factory import create_session_store
from couchsession.session.ports.outbound import DocumentClient, SessionStore
from couchsession.session.ttl import resolve_ttl
from couchsession.session.types import CONNECT_EVENT, DISCONNECT_EVENT, SessionRecord

__all__ = [
    "CONNECT_EVENT",
    "CallbackSessionStore",
    "DISCONNECT_EVENT",
    "DocumentClient",
    "SessionRecord",
    "SessionStore",
    "create_session_store",
    "resolve_ttl",
]
