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
"""Security headers middleware for Starlette — pure ASGI."""

from __future__ import annotations

import logging
import secrets
from typing import Any

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from cspkit.policy.csp import CspPolicy
from cspkit.policy.directives import CspDirective
from cspkit.web.decision import ResponseDecision
from cspkit.web.properties import SecurityHeadersProperties, build_decision

logger = logging.getLogger(__name__)

NONCE_STATE_KEY = "csp_nonce"


class SecurityHeadersMiddleware:
    """Adds CSP and X-Frame-Options headers to HTML responses.

    The decision runs on the ``http.response.start`` message, once per
    response, after the endpoint has fixed status and content type and
    before any body bytes go out. Headers are set, not appended.

    With ``nonce=True`` every request gets a fresh nonce in
    ``request.state.csp_nonce``; it is added to ``script-src`` and
    ``style-src`` of a per-response clone of the policy. Development error
    pages keep their relaxed policy without a nonce.
    """

    def __init__(
        self,
        app: ASGIApp,
        decision: ResponseDecision,
        development: bool = False,
        nonce: bool = False,
    ) -> None:
        self.app = app
        self._decision = decision
        self._development = development
        self._nonce = nonce

    @classmethod
    def from_properties(cls, app: ASGIApp, properties: SecurityHeadersProperties) -> ASGIApp:
        """Wrap *app* as configured; returns *app* untouched when disabled."""
        if not properties.enabled:
            logger.info("Security headers middleware disabled")
            return app
        return cls(
            app,
            build_decision(properties),
            development=properties.development,
            nonce=properties.nonce,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        nonce: str | None = None
        if self._nonce:
            nonce = secrets.token_urlsafe(16)
            scope.setdefault("state", {})[NONCE_STATE_KEY] = nonce

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                self._apply(message, nonce)
            await send(message)

        await self.app(scope, receive, send_with_headers)

    def _apply(self, message: Message, nonce: str | None) -> None:
        headers = MutableHeaders(scope=message)
        status = int(message.get("status", 200))
        content_type = headers.get("content-type")

        policy: CspPolicy | None = None
        if nonce is not None and self._decision.applies_to(content_type):
            policy = self._decision.select_policy(status, self._development)
            # A nonce disables 'unsafe-inline', so the relaxed error page policy stays as is.
            if policy is self._decision.policy:
                policy = self._with_nonce(policy, nonce)

        emitted = self._decision.decide(content_type, status, self._development, policy=policy)
        for name, value in emitted.items():
            headers[name] = value
        if emitted:
            logger.debug("Security headers set", extra=_log_extra(status, content_type, emitted))

    @staticmethod
    def _with_nonce(policy: CspPolicy, nonce: str) -> CspPolicy:
        """Clone *policy* and allow *nonce* on ``script-src`` and ``style-src``.

        An undeclared directive starts from the ``default-src`` sources it
        would otherwise fall back to. Without ``default-src`` it is left
        undeclared, since nothing restricts it.
        """
        variant = policy.clone()
        fallback = variant.get(CspDirective.DEFAULT_SRC)
        for directive in (CspDirective.SCRIPT_SRC, CspDirective.STYLE_SRC):
            if not variant.has(directive):
                if fallback is None:
                    continue
                variant.set_directive(directive, fallback)
            variant.directive(directive).add_nonce(nonce)
        return variant


def _log_extra(status: int, content_type: str | None, headers: dict[str, str]) -> dict[str, Any]:
    return {"status": status, "content_type": content_type, "headers": sorted(headers)}
