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
"""Expiry derivation for session records."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

# Largest relative expiry the server turns into a valid absolute timestamp.
MAX_TTL = 50 * 365 * 86400


def cookie_max_age(session: Any) -> int | float | None:
    """Return ``session["cookie"]["maxAge"]`` when it is a number, else ``None``."""
    if not isinstance(session, Mapping):
        return None
    cookie = session.get("cookie")
    if not isinstance(cookie, Mapping):
        return None
    max_age = cookie.get("maxAge")
    if isinstance(max_age, bool) or not isinstance(max_age, int | float):
        return None
    return max_age


def resolve_ttl(session: Any, ttl_override: int | None, default_ttl: int) -> int:
    """Compute the expiry in seconds for *session*.

    A truthy *ttl_override* wins. Otherwise the cookie ``maxAge`` (milliseconds)
    is floor-divided into whole seconds. Anything else, including a malformed
    record or a negative or out-of-range ``maxAge``, falls back to
    *default_ttl*.
    """
    if ttl_override:
        return int(ttl_override)
    max_age = cookie_max_age(session)
    if max_age is None or not math.isfinite(max_age) or max_age < 0:
        return default_ttl
    seconds = int(max_age // 1000)
    if seconds > MAX_TTL:
        return default_ttl
    return seconds
