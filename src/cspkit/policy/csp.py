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
"""Content-Security-Policy aggregate and serializer.

A :class:`CspPolicy` owns one :class:`CspDirectiveValue` per declared
directive plus the policy-wide flags. The base policy of an application is
built once and then frozen; a response that needs a different policy works
on :meth:`CspPolicy.clone`, never on the shared instance.

Wire format::

    default-src 'self'; script-src 'self' 'unsafe-inline'; report-uri /csp
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from cspkit.kernel.exceptions import PolicyFrozenException
from cspkit.policy.directives import CspDirective, CspDirectiveValue, normalize_token
from cspkit.policy.uris import require_report_uri

HEADER_NAME = "Content-Security-Policy"
REPORT_ONLY_HEADER_NAME = "Content-Security-Policy-Report-Only"
LEGACY_HEADER_NAMES = ("X-Content-Security-Policy", "X-WebKit-CSP")

_DIRECTIVE_SEPARATOR = "; "


def _directive_property(directive: CspDirective) -> property:
    def getter(self: CspPolicy) -> CspDirectiveValue:
        return self.directive(directive)

    def setter(self: CspPolicy, value: CspDirectiveValue | Iterable[str]) -> None:
        self.set_directive(directive, value)

    return property(getter, setter, doc=f"The ``{directive}`` source list (materialized on access).")


class CspPolicy:
    """Directive values and flags that serialize to one CSP header value."""

    def __init__(
        self,
        *,
        report_only: bool = False,
        report_uri: str | None = None,
        report_to: str | None = None,
        upgrade_insecure_requests: bool = False,
        block_all_mixed_content: bool = False,
    ) -> None:
        self._directives: dict[CspDirective, CspDirectiveValue] = {}
        self._frozen = False
        self._report_only = bool(report_only)
        self._report_uri: str | None = None
        self._report_to: str | None = None
        self._upgrade_insecure_requests = bool(upgrade_insecure_requests)
        self._block_all_mixed_content = bool(block_all_mixed_content)
        self.report_uri = report_uri
        self.report_to = report_to

    @classmethod
    def from_mapping(
        cls,
        directives: Mapping[CspDirective | str, Iterable[str] | None],
        **flags: Any,
    ) -> CspPolicy:
        """Build a policy from ``{"script-src": ["'self'"], ...}``.

        An empty list declares the directive with no sources; ``None`` leaves
        it absent.
        """
        policy = cls(**flags)
        for name, tokens in directives.items():
            if tokens is None:
                continue
            if isinstance(tokens, str):
                tokens = tokens.split()
            policy.set_directive(name, tokens)
        return policy

    # -- directives -----------------------------------------------------------

    def directive(self, name: CspDirective | str) -> CspDirectiveValue:
        """Return the value for *name*, registering an empty one on first access.

        On a frozen policy a missing directive comes back as a detached,
        frozen empty value and nothing is registered.
        """
        key = CspDirective.parse(name)
        value = self._directives.get(key)
        if value is None:
            value = CspDirectiveValue()
            if self._frozen:
                return value.freeze()
            self._directives[key] = value
        return value

    def set_directive(self, name: CspDirective | str, value: CspDirectiveValue | Iterable[str]) -> CspDirectiveValue:
        """Replace the source list of *name* with a private copy of *value*."""
        key = CspDirective.parse(name)
        fresh = value.copy() if isinstance(value, CspDirectiveValue) else CspDirectiveValue(value)
        self._check_mutable()
        self._directives[key] = fresh
        return fresh

    def get(self, name: CspDirective | str) -> CspDirectiveValue | None:
        """Return the value for *name* if declared, without materializing it."""
        return self._directives.get(CspDirective.parse(name))

    def has(self, name: CspDirective | str) -> bool:
        return CspDirective.parse(name) in self._directives

    def remove(self, name: CspDirective | str) -> None:
        """Make *name* absent again."""
        key = CspDirective.parse(name)
        self._check_mutable()
        self._directives.pop(key, None)

    @property
    def declared(self) -> tuple[CspDirective, ...]:
        return tuple(d for d in CspDirective if d in self._directives)

    default_src = _directive_property(CspDirective.DEFAULT_SRC)
    script_src = _directive_property(CspDirective.SCRIPT_SRC)
    style_src = _directive_property(CspDirective.STYLE_SRC)
    img_src = _directive_property(CspDirective.IMG_SRC)
    connect_src = _directive_property(CspDirective.CONNECT_SRC)
    font_src = _directive_property(CspDirective.FONT_SRC)
    object_src = _directive_property(CspDirective.OBJECT_SRC)
    media_src = _directive_property(CspDirective.MEDIA_SRC)
    frame_src = _directive_property(CspDirective.FRAME_SRC)
    worker_src = _directive_property(CspDirective.WORKER_SRC)
    frame_ancestors = _directive_property(CspDirective.FRAME_ANCESTORS)
    base_uri = _directive_property(CspDirective.BASE_URI)
    form_action = _directive_property(CspDirective.FORM_ACTION)

    # -- flags ----------------------------------------------------------------

    @property
    def report_only(self) -> bool:
        return self._report_only

    @report_only.setter
    def report_only(self, value: bool) -> None:
        self._check_mutable()
        self._report_only = bool(value)

    @property
    def report_uri(self) -> str | None:
        return self._report_uri

    @report_uri.setter
    def report_uri(self, value: str | None) -> None:
        checked = None if value is None else require_report_uri(value, field="report_uri")
        self._check_mutable()
        self._report_uri = checked

    @property
    def report_to(self) -> str | None:
        """Reporting API group name emitted as ``report-to <group>``."""
        return self._report_to

    @report_to.setter
    def report_to(self, value: str | None) -> None:
        checked = None if value is None else normalize_token(value)
        self._check_mutable()
        self._report_to = checked

    @property
    def upgrade_insecure_requests(self) -> bool:
        return self._upgrade_insecure_requests

    @upgrade_insecure_requests.setter
    def upgrade_insecure_requests(self, value: bool) -> None:
        self._check_mutable()
        self._upgrade_insecure_requests = bool(value)

    @property
    def block_all_mixed_content(self) -> bool:
        return self._block_all_mixed_content

    @block_all_mixed_content.setter
    def block_all_mixed_content(self, value: bool) -> None:
        self._check_mutable()
        self._block_all_mixed_content = bool(value)

    # -- lifecycle ------------------------------------------------------------

    def clone(self) -> CspPolicy:
        """Deep copy; the clone is mutable even if this policy is frozen."""
        clone = CspPolicy(
            report_only=self._report_only,
            report_uri=self._report_uri,
            report_to=self._report_to,
            upgrade_insecure_requests=self._upgrade_insecure_requests,
            block_all_mixed_content=self._block_all_mixed_content,
        )
        clone._directives = {key: value.copy() for key, value in self._directives.items()}
        return clone

    def freeze(self) -> CspPolicy:
        """Reject every later mutation of this policy and its directive values."""
        self._frozen = True
        for value in self._directives.values():
            value.freeze()
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise PolicyFrozenException(
                "Policy is frozen; clone it before changing it",
                code="POLICY_FROZEN",
            )

    # -- serialization --------------------------------------------------------

    def serialize(self) -> str:
        parts: list[str] = []
        for directive in CspDirective:
            value = self._directives.get(directive)
            if value is None:
                continue
            sources = value.serialize()
            parts.append(f"{directive} {sources}" if sources else str(directive))

        if self._report_uri is not None:
            parts.append(f"report-uri {self._report_uri}")
        if self._report_to is not None:
            parts.append(f"report-to {self._report_to}")
        if self._upgrade_insecure_requests:
            parts.append("upgrade-insecure-requests")
        if self._block_all_mixed_content:
            parts.append("block-all-mixed-content")

        return _DIRECTIVE_SEPARATOR.join(parts)

    @property
    def header_name(self) -> str:
        return REPORT_ONLY_HEADER_NAME if self._report_only else HEADER_NAME

    @property
    def legacy_header_names(self) -> tuple[str, ...]:
        if self._report_only:
            return tuple(f"{name}-Report-Only" for name in LEGACY_HEADER_NAMES)
        return LEGACY_HEADER_NAMES

    def headers(self, include_legacy: bool = True) -> dict[str, str]:
        """Header name -> value, with the same serialized value under every name."""
        value = self.serialize()
        names = (self.header_name, *self.legacy_header_names) if include_legacy else (self.header_name,)
        return dict.fromkeys(names, value)

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return f"CspPolicy({self.serialize()!r}, report_only={self._report_only})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CspPolicy):
            return NotImplemented
        return self._report_only == other._report_only and self.serialize() == other.serialize()

    __hash__ = None  # type: ignore[assignment]
