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
"""JSON encoding of session records."""

from __future__ import annotations

import json
from typing import Any

from couchsession.kernel.exceptions import SessionSerializationException


def encode_session(session: Any) -> str:
    """Serialize *session* to strict JSON (no NaN or Infinity)."""
    try:
        return json.dumps(session, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SessionSerializationException(
            f"Session is not JSON serializable: {exc}",
            code="SESSION_ENCODE",
        ) from exc


def decode_session(raw: bytes | str, key: str) -> Any:
    """Parse a stored payload back into a session record."""
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes | bytearray) else raw
        return json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError, TypeError) as exc:
        raise SessionSerializationException(
            f"Stored session '{key}' is not valid JSON",
            code="SESSION_DECODE",
            context={"key": key},
        ) from exc
