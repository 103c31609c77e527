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
"""Tests for the cspkit exception hierarchy."""

from cspkit.kernel.exceptions import (
    ConfigurationException,
    CspKitException,
    InvalidArgumentException,
    PolicyFrozenException,
)


class TestCspKitException:
    def test_basic_creation(self):
        exc = CspKitException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_code_and_context(self):
        exc = CspKitException("bad token", code="INVALID_TOKEN", context={"token": "a;b"})
        assert exc.code == "INVALID_TOKEN"
        assert exc.context["token"] == "a;b"

    def test_context_not_shared_between_instances(self):
        exc = CspKitException("test")
        exc.context["key"] = "value"
        assert CspKitException("test2").context == {}


class TestExceptionHierarchy:
    def test_configuration_is_cspkit(self):
        assert issubclass(ConfigurationException, CspKitException)

    def test_invalid_argument_is_configuration(self):
        assert issubclass(InvalidArgumentException, ConfigurationException)

    def test_invalid_argument_is_value_error(self):
        assert issubclass(InvalidArgumentException, ValueError)

    def test_frozen_is_cspkit_but_not_configuration(self):
        assert issubclass(PolicyFrozenException, CspKitException)
        assert not issubclass(PolicyFrozenException, ConfigurationException)
