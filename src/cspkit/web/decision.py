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
"""Per-response header decision — which policy, if any, a response gets."""

from __future__ import annotations

import logging

from cspkit.kernel.exceptions import InvalidArgumentException
from cspkit.policy.csp import CspPolicy
from cspkit.policy.frame_options import HEADER_NAME as FRAME_OPTIONS_HEADER, FrameOptionsPolicy

logger = logging.getLogger(__name__)

HTML_MEDIA_TYPE = "text/html"
INTERNAL_SERVER_ERROR = 500


def media_type_of(content_type: str | None) -> str:
    """``"Text/HTML; charset=utf-8"`` -> ``"text/html"``; ``""`` when unset."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


class ResponseDecision:
    """Decides the security headers of one response from its metadata.

    Holds the shared base policies and never mutates them. Responses that
    need a wider policy get a clone.
    """

    def __init__(
        self,
        policy: CspPolicy,
        frame_options: FrameOptionsPolicy | None = None,
        include_legacy: bool = True,
    ) -> None:
        if policy is None:
            raise InvalidArgumentException(
                "A base CspPolicy is required",
                code="MISSING_POLICY",
            )
        self._policy = policy
        self._frame_options = frame_options
        self._include_legacy = include_legacy

    @property
    def policy(self) -> CspPolicy:
        return self._policy

    @property
    def frame_options(self) -> FrameOptionsPolicy | None:
        return self._frame_options

    def applies_to(self, content_type: str | None) -> bool:
        return media_type_of(content_type) == HTML_MEDIA_TYPE

    def select_policy(self, status_code: int, development: bool = False) -> CspPolicy:
        """The base policy, or a relaxed clone for a development error page.

        The framework's development error page renders inline styles and
        scripts, so 500 responses in development mode get ``'unsafe-inline'``
        on ``style-src`` and ``script-src``.
        """
        if development and status_code == INTERNAL_SERVER_ERROR:
            relaxed = self._policy.clone()
            relaxed.style_src.add_unsafe_inline()
            relaxed.script_src.add_unsafe_inline()
            logger.debug("Relaxed CSP for development error page: %s", relaxed)
            return relaxed
        return self._policy

    def decide(
        self,
        content_type: str | None,
        status_code: int,
        development: bool = False,
        policy: CspPolicy | None = None,
    ) -> dict[str, str]:
        """Header name -> value for this response; ``{}`` for non-HTML responses.

        *policy* overrides the selected policy, for callers that already
        derived a per-request variant.
        """
        if not self.applies_to(content_type):
            return {}

        candidate = policy if policy is not None else self.select_policy(status_code, development)
        headers: dict[str, str] = {}
        value = candidate.serialize()
        if value:
            headers.update(dict.fromkeys(self._csp_header_names(candidate), value))
        if self._frame_options is not None:
            headers[FRAME_OPTIONS_HEADER] = self._frame_options.serialize()
        return headers

    def _csp_header_names(self, policy: CspPolicy) -> tuple[str, ...]:
        if self._include_legacy:
            return (policy.header_name, *policy.legacy_header_names)
        return (policy.header_name,)
