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
"""URI checks shared by the frame-options and CSP reporting settings."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlsplit

from cspkit.kernel.exceptions import InvalidArgumentException

# Anything outside visible ASCII would break the header line.
_NON_HEADER_SAFE = re.compile(r"[^\x21-\x7e]")


def require_absolute_uri(uri: Any, *, field: str) -> str:
    """Return *uri* if it is an absolute ``scheme://host`` URI, else raise."""
    text = _require_header_safe(uri, field=field)
    try:
        parts = urlsplit(text)
        # .port raises ValueError on a non-numeric or out-of-range port.
        valid = bool(parts.scheme and parts.hostname) and parts.port != 0
    except ValueError as exc:
        raise _invalid(field, text) from exc
    if not valid:
        raise _invalid(field, text)
    return text


def require_report_uri(uri: Any, *, field: str) -> str:
    """Like :func:`require_absolute_uri` but also accepts an origin-relative path."""
    text = _require_header_safe(uri, field=field)
    if text.startswith("/") and not text.startswith("//"):
        return text
    return require_absolute_uri(text, field=field)


def origin_of(uri: str) -> str:
    """``https://user@example.com:8443/path?q`` -> ``https://example.com:8443``."""
    parts = urlsplit(uri)
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    if parts.port is not None:
        host = f"{host}:{parts.port}"
    return f"{parts.scheme}://{host}"


def _require_header_safe(uri: Any, *, field: str) -> str:
    if uri is None:
        raise InvalidArgumentException(f"{field} must not be None", code="INVALID_URI", context={"field": field})
    if not isinstance(uri, str):
        raise InvalidArgumentException(
            f"{field} must be a string, got {type(uri).__name__}",
            code="INVALID_URI",
            context={"field": field},
        )
    if not uri or _NON_HEADER_SAFE.search(uri) or ";" in uri or "," in uri:
        raise _invalid(field, uri)
    return uri


def _invalid(field: str, uri: str) -> InvalidArgumentException:
    return InvalidArgumentException(
        f"{field} is not a well-formed absolute URI: {uri!r}",
        code="INVALID_URI",
        context={"field": field, "uri": uri},
    )
