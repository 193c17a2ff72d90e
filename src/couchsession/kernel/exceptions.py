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
"""Exception hierarchy for couchsession.

Only failures raised by the adapter itself live here. Errors coming from the
Couchbase driver (timeouts, network, server, missing documents) are passed
through unchanged so callers can handle ``couchbase.exceptions`` directly.

Categories:
- BusinessException: invalid session payloads
- InfrastructureException: connection lifecycle failures
"""

from __future__ import annotations

# =============================================================================
# Base Exception
# =============================================================================


class CouchSessionException(Exception):
    """Base exception for all couchsession errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "SESSION_SERIALIZATION").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(CouchSessionException):
    """Errors caused by the data handed to the store."""


class ValidationException(BusinessException):
    """Input validation failures."""


class SessionSerializationException(ValidationException):
    """A session record could not be encoded to, or decoded from, JSON."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(CouchSessionException):
    """Connection and lifecycle failures."""


class StoreConnectionException(InfrastructureException):
    """The connection to the backing cluster could not be established."""


class StoreClosedException(InfrastructureException):
    """An operation was issued after the store was disconnected."""
