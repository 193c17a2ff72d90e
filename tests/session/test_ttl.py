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
"""Tests for session expiry derivation."""

import pytest

from couchsession.session.ttl import MAX_TTL, cookie_max_age, resolve_ttl

ONE_DAY = 86400


class TestResolveTtl:
    def test_override_wins(self):
        assert resolve_ttl({"cookie": {"maxAge": 2000}}, 600, ONE_DAY) == 600

    def test_zero_override_falls_through(self):
        assert resolve_ttl({"cookie": {"maxAge": 2000}}, 0, ONE_DAY) == 2

    def test_max_age_milliseconds_to_seconds(self):
        assert resolve_ttl({"cookie": {"maxAge": 2000}}, None, ONE_DAY) == 2

    def test_max_age_is_floored(self):
        assert resolve_ttl({"cookie": {"maxAge": 1999.9}}, None, ONE_DAY) == 1

    def test_sub_second_max_age_is_zero(self):
        assert resolve_ttl({"cookie": {"maxAge": 500}}, None, ONE_DAY) == 0

    def test_missing_max_age_uses_default(self):
        assert resolve_ttl({"cookie": {}}, None, ONE_DAY) == ONE_DAY

    def test_null_max_age_uses_default(self):
        assert resolve_ttl({"cookie": {"maxAge": None}}, None, ONE_DAY) == ONE_DAY

    def test_injected_default(self):
        assert resolve_ttl({}, None, 1800) == 1800

    @pytest.mark.parametrize(
        "session",
        [
            None,
            "not-a-session",
            [1, 2, 3],
            {"cookie": None},
            {"cookie": "abc"},
            {"cookie": {"maxAge": "2000"}},
            {"cookie": {"maxAge": True}},
            {"cookie": {"maxAge": float("nan")}},
            {"cookie": {"maxAge": float("inf")}},
            {"cookie": {"maxAge": -5000}},
            {"cookie": {"maxAge": 1e20}},
        ],
    )
    def test_malformed_input_degrades_to_default(self, session):
        assert resolve_ttl(session, None, ONE_DAY) == ONE_DAY


class TestCookieMaxAge:
    def test_reads_nested_value(self):
        assert cookie_max_age({"cookie": {"maxAge": 60000}}) == 60000

    def test_returns_none_without_cookie(self):
        assert cookie_max_age({"name": "cm"}) is None


class TestTtlBounds:
    def test_largest_allowed_max_age(self):
        assert resolve_ttl({"cookie": {"maxAge": MAX_TTL * 1000}}, None, ONE_DAY) == MAX_TTL

    def test_just_past_the_limit_uses_default(self):
        assert resolve_ttl({"cookie": {"maxAge": (MAX_TTL + 1) * 1000}}, None, ONE_DAY) == ONE_DAY
