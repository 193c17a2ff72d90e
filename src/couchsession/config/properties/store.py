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
"""Session store configuration properties."""

from __future__ import annotations

import re
from dataclasses import dataclass

from couchsession.core.config import config_properties

ONE_DAY = 86400
DEFAULT_OPERATION_TIMEOUT_MS = 10000
DEFAULT_PREFIX = "sess:"

_ADDRESS_SEPARATOR = re.compile(r"[;,]")


@config_properties(prefix="couchsession.store")
@dataclass(frozen=True)
class SessionStoreProperties:
    """Configuration for the Couchbase session store (couchsession.store.*).

    Timeouts are in milliseconds, TTLs in seconds. ``host`` takes precedence
    over ``hosts``; either may be a single address, a ``;``-separated list,
    a list, or a complete ``couchbase://`` / ``couchbases://`` connection
    string.
    """

    host: str | list[str] | None = None
    hosts: str | list[str] | None = None
    username: str | None = None
    password: str | None = None
    bucket: str = "default"
    cachefile: str | None = None
    connection_timeout: int | None = None
    operation_timeout: int | None = DEFAULT_OPERATION_TIMEOUT_MS
    collection_name: str | None = None
    ttl: int | None = None
    prefix: str | None = DEFAULT_PREFIX
    default_ttl: int = ONE_DAY

    @property
    def key_prefix(self) -> str:
        return DEFAULT_PREFIX if self.prefix is None else self.prefix

    @property
    def effective_operation_timeout(self) -> int:
        return self.operation_timeout or DEFAULT_OPERATION_TIMEOUT_MS

    @property
    def effective_username(self) -> str:
        # Legacy bucket-scoped auth: the bucket name doubles as the user.
        return self.username or self.bucket

    def addresses(self) -> list[str]:
        raw = self.host if self.host is not None else self.hosts
        if raw is None:
            return ["localhost"]
        if isinstance(raw, str):
            found = [a.strip() for a in _ADDRESS_SEPARATOR.split(raw)]
        else:
            found = [str(a).strip() for a in raw]
        return [a for a in found if a] or ["localhost"]

    def connection_string(self) -> str:
        raw = self.host if self.host is not None else self.hosts
        if isinstance(raw, str) and "://" in raw:
            return raw
        return "couchbase://" + ",".join(self.addresses())
