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
"""Tests for SessionStoreProperties."""

from __future__ import annotations

import dataclasses

import pytest

from couchsession.config.properties.store import ONE_DAY, SessionStoreProperties
from couchsession.core.config import Config


class TestDefaults:
    def test_defaults(self):
        props = SessionStoreProperties()
        assert props.key_prefix == "sess:"
        assert props.bucket == "default"
        assert props.effective_operation_timeout == 10000
        assert props.ttl is None
        assert props.default_ttl == ONE_DAY == 86400

    def test_is_immutable(self):
        props = SessionStoreProperties()
        with pytest.raises(dataclasses.FrozenInstanceError):
            props.prefix = "other:"  # type: ignore[misc]

    def test_none_prefix_falls_back(self):
        assert SessionStoreProperties(prefix=None).key_prefix == "sess:"

    def test_zero_operation_timeout_falls_back(self):
        assert SessionStoreProperties(operation_timeout=0).effective_operation_timeout == 10000

    def test_username_falls_back_to_bucket(self):
        assert SessionStoreProperties(bucket="sessions").effective_username == "sessions"
        assert SessionStoreProperties(bucket="sessions", username="app").effective_username == "app"


class TestConnectionString:
    def test_default_host(self):
        assert SessionStoreProperties().connection_string() == "couchbase://localhost"

    def test_semicolon_separated_hosts(self):
        props = SessionStoreProperties(host="10.0.0.1:8091;10.0.0.2:8091")
        assert props.addresses() == ["10.0.0.1:8091", "10.0.0.2:8091"]
        assert props.connection_string() == "couchbase://10.0.0.1:8091,10.0.0.2:8091"

    def test_host_list(self):
        assert SessionStoreProperties(host=["a", "b"]).connection_string() == "couchbase://a,b"

    def test_hosts_used_when_host_unset(self):
        assert SessionStoreProperties(hosts="c;d").connection_string() == "couchbase://c,d"

    def test_host_wins_over_hosts(self):
        assert SessionStoreProperties(host="a", hosts="b").connection_string() == "couchbase://a"

    def test_full_connection_string_is_kept(self):
        props = SessionStoreProperties(host="couchbases://cb.example.com?ssl=no_verify")
        assert props.connection_string() == "couchbases://cb.example.com?ssl=no_verify"

    def test_blank_host_falls_back_to_localhost(self):
        assert SessionStoreProperties(host=" ; ").addresses() == ["localhost"]


class TestBinding:
    def test_binds_original_option_names(self):
        config = Config(
            {
                "couchsession": {
                    "store": {
                        "host": "127.0.0.1:8091",
                        "bucket": "sessions",
                        "username": "admin",
                        "password": "password",
                        "cachefile": "/tmp/cb-cache",
                        "connectionTimeout": 2000,
                        "operationTimeout": 3000,
                        "collectionName": "web",
                        "ttl": 600,
                        "prefix": "app:",
                    }
                }
            }
        )

        props = config.bind(SessionStoreProperties)

        assert props.host == "127.0.0.1:8091"
        assert props.bucket == "sessions"
        assert props.cachefile == "/tmp/cb-cache"
        assert props.connection_timeout == 2000
        assert props.effective_operation_timeout == 3000
        assert props.collection_name == "web"
        assert props.ttl == 600
        assert props.key_prefix == "app:"

    def test_binds_package_defaults(self, tmp_path):
        props = Config.from_file(tmp_path / "couchsession.yaml").bind(SessionStoreProperties)
        assert props == SessionStoreProperties()
