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
"""X-Frame-Options policy."""

from __future__ import annotations

from enum import StrEnum

from cspkit.kernel.exceptions import InvalidArgumentException
from cspkit.policy.directives import CspDirectiveValue
from cspkit.policy.uris import origin_of, require_absolute_uri

HEADER_NAME = "X-Frame-Options"


class FrameOptionsMode(StrEnum):
    """Header value keyword for each framing mode."""

    DENY = "DENY"
    SAME_ORIGIN = "SAMEORIGIN"
    ALLOW_FROM = "ALLOW-FROM"


class FrameOptionsPolicy:
    """Which origins may frame the page.

    ``allow_from_uri`` is set if and only if the mode is ``ALLOW_FROM``.
    The three mutators validate before touching state, so the mode and the
    origin always change together.
    """

    __slots__ = ("_allow_from_uri", "_mode")

    def __init__(
        self,
        mode: FrameOptionsMode | str = FrameOptionsMode.DENY,
        allow_from_uri: str | None = None,
    ) -> None:
        self._mode = FrameOptionsMode.DENY
        self._allow_from_uri: str | None = None

        resolved = _parse_mode(mode)
        if resolved is FrameOptionsMode.ALLOW_FROM:
            self.allow_from(allow_from_uri)  # type: ignore[arg-type]
        elif allow_from_uri is not None:
            raise InvalidArgumentException(
                f"allow_from_uri is only valid with {FrameOptionsMode.ALLOW_FROM}, not {resolved}",
                code="INVALID_FRAME_OPTIONS",
                context={"mode": str(resolved)},
            )
        elif resolved is FrameOptionsMode.SAME_ORIGIN:
            self.same_origin()

    @classmethod
    def from_value(cls, value: str, allow_from: str | None = None) -> FrameOptionsPolicy:
        """Build from a config string such as ``deny``, ``same-origin`` or ``allow-from``."""
        return cls(_parse_mode(value), allow_from)

    @property
    def mode(self) -> FrameOptionsMode:
        return self._mode

    @property
    def allow_from_uri(self) -> str | None:
        return self._allow_from_uri

    def deny(self) -> None:
        self._mode = FrameOptionsMode.DENY
        self._allow_from_uri = None

    def same_origin(self) -> None:
        self._mode = FrameOptionsMode.SAME_ORIGIN
        self._allow_from_uri = None

    def allow_from(self, uri: str) -> None:
        """Allow framing by *uri*; raises InvalidArgumentException unless it is absolute."""
        checked = require_absolute_uri(uri, field="allow_from_uri")
        self._mode = FrameOptionsMode.ALLOW_FROM
        self._allow_from_uri = checked

    def serialize(self) -> str:
        if self._mode is FrameOptionsMode.ALLOW_FROM:
            return f"{self._mode} {self._allow_from_uri}"
        return str(self._mode)

    def to_frame_ancestors(self) -> CspDirectiveValue:
        """The equivalent CSP ``frame-ancestors`` source list."""
        value = CspDirectiveValue()
        if self._mode is FrameOptionsMode.DENY:
            return value.allow_none()
        if self._mode is FrameOptionsMode.SAME_ORIGIN:
            return value.allow_self()
        return value.add_token(origin_of(self._allow_from_uri))  # type: ignore[arg-type]

    def copy(self) -> FrameOptionsPolicy:
        return FrameOptionsPolicy(self._mode, self._allow_from_uri)

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        if self._allow_from_uri is None:
            return f"FrameOptionsPolicy({self._mode.name})"
        return f"FrameOptionsPolicy({self._mode.name}, {self._allow_from_uri!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrameOptionsPolicy):
            return NotImplemented
        return (self._mode, self._allow_from_uri) == (other._mode, other._allow_from_uri)

    __hash__ = None  # type: ignore[assignment]


def _parse_mode(value: FrameOptionsMode | str) -> FrameOptionsMode:
    if isinstance(value, FrameOptionsMode):
        return value
    if isinstance(value, str):
        key = value.strip().upper().replace("_", "-")
        aliases = {"DENY": "DENY", "SAMEORIGIN": "SAMEORIGIN", "SAME-ORIGIN": "SAMEORIGIN", "ALLOW-FROM": "ALLOW-FROM"}
        if key in aliases:
            return FrameOptionsMode(aliases[key])
    raise InvalidArgumentException(
        f"Unknown X-Frame-Options mode: {value!r}",
        code="INVALID_FRAME_OPTIONS",
        context={"mode": value},
    )
