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
"""Security header configuration properties and the policy factory.

Example ``cspkit.yaml``::

    cspkit:
      headers:
        frame-options: sameorigin
        report-uri: https://example.com/csp-report
        directives:
          default-src: ["'self'"]
          script-src: ["'self'", "https://cdn.example.com"]
          object-src: []          # declared, no sources
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from cspkit.core.config import config_properties
from cspkit.kernel.exceptions import ConfigurationException
from cspkit.policy.csp import CspPolicy
from cspkit.policy.frame_options import FrameOptionsPolicy
from cspkit.web.decision import ResponseDecision

logger = logging.getLogger(__name__)


@config_properties(prefix="cspkit.headers")
@dataclass
class SecurityHeadersProperties:
    """Configuration for the security headers middleware (cspkit.headers.*)."""

    enabled: bool = True
    development: bool = False
    legacy_headers: bool = True
    nonce: bool = False
    frame_options: str | None = "deny"  # None = don't send X-Frame-Options
    frame_options_allow_from: str | None = None
    report_only: bool = False
    report_uri: str | None = None
    report_to: str | None = None
    upgrade_insecure_requests: bool = False
    block_all_mixed_content: bool = False
    directives: dict[str, Any] = field(default_factory=dict)


def build_csp_policy(props: SecurityHeadersProperties) -> CspPolicy:
    """Build the frozen base CSP policy described by *props*."""
    if not isinstance(props.directives, dict):
        raise ConfigurationException(
            "cspkit.headers.directives must be a mapping of directive name to source list",
            code="INVALID_DIRECTIVES",
            context={"directives": props.directives},
        )
    policy = CspPolicy.from_mapping(
        props.directives,
        report_only=props.report_only,
        report_uri=props.report_uri,
        report_to=props.report_to,
        upgrade_insecure_requests=props.upgrade_insecure_requests,
        block_all_mixed_content=props.block_all_mixed_content,
    )
    return policy.freeze()


def build_frame_options(props: SecurityHeadersProperties) -> FrameOptionsPolicy | None:
    if props.frame_options is None:
        return None
    return FrameOptionsPolicy.from_value(props.frame_options, props.frame_options_allow_from)


def build_decision(props: SecurityHeadersProperties) -> ResponseDecision:
    """Wire the ResponseDecision; configuration errors surface here, at startup."""
    policy = build_csp_policy(props)
    frame_options = build_frame_options(props)
    logger.info(
        "Security headers configured: %s=%r, X-Frame-Options=%r",
        policy.header_name,
        policy.serialize(),
        frame_options.serialize() if frame_options else None,
    )
    return ResponseDecision(policy, frame_options, include_legacy=props.legacy_headers)
