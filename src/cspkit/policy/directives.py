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
"""CSP directive names and per-directive source lists.

A :class:`CspDirectiveValue` is an ordered set of source tokens. Tokens keep
the order in which they were first added and are never duplicated. The
``'none'`` keyword cannot coexist with any other token: adding ``'none'``
clears the list, adding anything else drops ``'none'``.

Usage::

    script_src = CspDirectiveValue().allow_self().add_token("https://cdn.example.com")
    str(script_src)  # "'self' https://cdn.example.com"
"""

from __future__ import annotations

import base64
import hashlib
import re
from collections.abc import Iterable, Iterator
from enum import StrEnum
from typing import Any

from cspkit.kernel.exceptions import InvalidArgumentException, PolicyFrozenException

# =============================================================================
# Keywords
# =============================================================================

SELF = "'self'"
NONE = "'none'"
UNSAFE_INLINE = "'unsafe-inline'"
UNSAFE_EVAL = "'unsafe-eval'"
UNSAFE_HASHES = "'unsafe-hashes'"
STRICT_DYNAMIC = "'strict-dynamic'"
REPORT_SAMPLE = "'report-sample'"
WASM_UNSAFE_EVAL = "'wasm-unsafe-eval'"

HASH_ALGORITHMS = frozenset({"sha256", "sha384", "sha512"})

# Visible ASCII only, minus the directive and policy-list separators.
_INVALID_TOKEN_CHARS = re.compile(r"[^\x21-\x7e]|[;,]")
_BASE64_VALUE = re.compile(r"^[A-Za-z0-9+/_-]+={0,2}$")


# =============================================================================
# Directive names
# =============================================================================


class CspDirective(StrEnum):
    """Every directive cspkit can emit.

    Definition order is the serialization order of a policy. Add new members
    in the position they should appear on the wire.
    """

    DEFAULT_SRC = "default-src"
    SCRIPT_SRC = "script-src"
    SCRIPT_SRC_ELEM = "script-src-elem"
    SCRIPT_SRC_ATTR = "script-src-attr"
    STYLE_SRC = "style-src"
    STYLE_SRC_ELEM = "style-src-elem"
    STYLE_SRC_ATTR = "style-src-attr"
    IMG_SRC = "img-src"
    CONNECT_SRC = "connect-src"
    FONT_SRC = "font-src"
    OBJECT_SRC = "object-src"
    MEDIA_SRC = "media-src"
    CHILD_SRC = "child-src"
    FRAME_SRC = "frame-src"
    WORKER_SRC = "worker-src"
    MANIFEST_SRC = "manifest-src"
    PREFETCH_SRC = "prefetch-src"
    BASE_URI = "base-uri"
    FORM_ACTION = "form-action"
    FRAME_ANCESTORS = "frame-ancestors"
    NAVIGATE_TO = "navigate-to"
    PLUGIN_TYPES = "plugin-types"
    SANDBOX = "sandbox"
    REQUIRE_SRI_FOR = "require-sri-for"
    REQUIRE_TRUSTED_TYPES_FOR = "require-trusted-types-for"
    TRUSTED_TYPES = "trusted-types"

    @classmethod
    def parse(cls, name: CspDirective | str) -> CspDirective:
        """Resolve ``"script-src"``, ``"SCRIPT_SRC"`` or ``"script_src"`` to a member."""
        if isinstance(name, cls):
            return name
        if isinstance(name, str):
            normalized = name.strip().lower().replace("_", "-")
            try:
                return cls(normalized)
            except ValueError:
                pass
        raise InvalidArgumentException(
            f"Unknown CSP directive: {name!r}",
            code="INVALID_DIRECTIVE",
            context={"directive": name},
        )


# =============================================================================
# Directive value
# =============================================================================


def normalize_token(token: Any) -> str:
    """Strip surrounding whitespace and reject anything that breaks the header grammar."""
    if not isinstance(token, str):
        raise InvalidArgumentException(
            f"CSP source token must be a string, got {type(token).__name__}",
            code="INVALID_TOKEN",
            context={"token": token},
        )
    normalized = token.strip()
    if not normalized or _INVALID_TOKEN_CHARS.search(normalized):
        raise InvalidArgumentException(
            f"Invalid CSP source token: {token!r}",
            code="INVALID_TOKEN",
            context={"token": token},
        )
    return normalized


def _hash_algorithm(algorithm: Any) -> str:
    alg = algorithm.lower() if isinstance(algorithm, str) else algorithm
    if alg not in HASH_ALGORITHMS:
        raise InvalidArgumentException(
            f"Unsupported CSP hash algorithm: {algorithm!r}",
            code="INVALID_HASH",
            context={"algorithm": algorithm, "supported": sorted(HASH_ALGORITHMS)},
        )
    return alg


class CspDirectiveValue:
    """Ordered, deduplicated source list for one directive."""

    __slots__ = ("_frozen", "_tokens")

    def __init__(self, tokens: Iterable[str] = ()) -> None:
        self._tokens: dict[str, None] = {}
        self._frozen = False
        for token in tokens:
            self.add_token(token)

    # -- mutation -------------------------------------------------------------

    def add_token(self, token: str) -> CspDirectiveValue:
        """Add one source token and return ``self`` for chaining."""
        normalized = normalize_token(token)
        self._check_mutable()
        if normalized == NONE:
            self._tokens.clear()
        else:
            self._tokens.pop(NONE, None)
        self._tokens.setdefault(normalized, None)
        return self

    def add_tokens(self, *tokens: str) -> CspDirectiveValue:
        for token in tokens:
            self.add_token(token)
        return self

    def add_unsafe_inline(self) -> CspDirectiveValue:
        return self.add_token(UNSAFE_INLINE)

    def add_unsafe_eval(self) -> CspDirectiveValue:
        return self.add_token(UNSAFE_EVAL)

    def add_unsafe_hashes(self) -> CspDirectiveValue:
        return self.add_token(UNSAFE_HASHES)

    def add_strict_dynamic(self) -> CspDirectiveValue:
        return self.add_token(STRICT_DYNAMIC)

    def add_report_sample(self) -> CspDirectiveValue:
        return self.add_token(REPORT_SAMPLE)

    def add_wasm_unsafe_eval(self) -> CspDirectiveValue:
        return self.add_token(WASM_UNSAFE_EVAL)

    def allow_self(self) -> CspDirectiveValue:
        return self.add_token(SELF)

    def allow_none(self) -> CspDirectiveValue:
        return self.add_token(NONE)

    def add_nonce(self, nonce: str) -> CspDirectiveValue:
        """Add ``'nonce-<nonce>'``. The nonce must be base64 or base64url text."""
        if not isinstance(nonce, str) or not _BASE64_VALUE.match(nonce):
            raise InvalidArgumentException(
                f"CSP nonce must be base64 encoded: {nonce!r}",
                code="INVALID_NONCE",
            )
        return self.add_token(f"'nonce-{nonce}'")

    def add_hash(self, algorithm: str, digest: str) -> CspDirectiveValue:
        """Add ``'<algorithm>-<digest>'`` for a base64 encoded digest."""
        alg = _hash_algorithm(algorithm)
        if not isinstance(digest, str) or not _BASE64_VALUE.match(digest):
            raise InvalidArgumentException(
                f"CSP hash digest must be base64 encoded: {digest!r}",
                code="INVALID_HASH",
                context={"algorithm": alg},
            )
        return self.add_token(f"'{alg}-{digest}'")

    def add_hash_of(self, content: str | bytes, algorithm: str = "sha256") -> CspDirectiveValue:
        """Hash inline script/style *content* and allow it."""
        alg = _hash_algorithm(algorithm)
        data = content.encode("utf-8") if isinstance(content, str) else content
        digest = base64.b64encode(hashlib.new(alg, data).digest()).decode("ascii")
        return self.add_hash(alg, digest)

    # -- state ----------------------------------------------------------------

    def copy(self) -> CspDirectiveValue:
        """Return an independent, mutable copy."""
        clone = CspDirectiveValue()
        clone._tokens = dict(self._tokens)
        return clone

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> CspDirectiveValue:
        self._frozen = True
        return self

    def _check_mutable(self) -> None:
        if self._frozen:
            raise PolicyFrozenException(
                "Directive value is frozen; clone the policy before changing it",
                code="POLICY_FROZEN",
            )

    # -- read access ----------------------------------------------------------

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(self._tokens)

    def serialize(self) -> str:
        """Tokens joined by single spaces; ``""`` for a declared but empty directive."""
        return " ".join(self._tokens)

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return f"CspDirectiveValue({list(self._tokens)!r})"

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._tokens))

    def __len__(self) -> int:
        return len(self._tokens)

    def __bool__(self) -> bool:
        # An empty but declared directive is still meaningful.
        return True

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CspDirectiveValue):
            return NotImplemented
        return self.tokens == other.tokens

    __hash__ = None  # type: ignore[assignment]
