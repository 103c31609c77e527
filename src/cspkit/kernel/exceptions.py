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
"""Exception hierarchy for cspkit.

All errors raised by the package inherit from CspKitException, so callers
can catch the base class at wiring time or a specific subclass for targeted
handling.

Categories:
- ConfigurationException: invalid or missing configuration
- InvalidArgumentException: malformed input to a policy constructor or mutator
- PolicyFrozenException: mutation attempted on a frozen base policy
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class CspKitException(Exception):
    """Base exception for all cspkit errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "INVALID_TOKEN").
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
# Configuration Exceptions
# =============================================================================


class ConfigurationException(CspKitException):
    """Configuration is invalid or incomplete."""


class InvalidArgumentException(ConfigurationException, ValueError):
    """A policy constructor or mutator received a malformed value.

    Raised synchronously at the call site: bad tokens, bad URIs, unknown
    directive names. Never sanitized silently.
    """


# =============================================================================
# Policy State Exceptions
# =============================================================================


class PolicyFrozenException(CspKitException):
    """A frozen policy was mutated; clone it first."""
