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
"""Policy model: CSP directives, CSP policies and X-Frame-Options."""

from cspkit.policy.csp import (
    HEADER_NAME,
    LEGACY_HEADER_NAMES,
    REPORT_ONLY_HEADER_NAME,
    CspPolicy,
)
from cspkit.policy.directives import (
    NONE,
    SELF,
    STRICT_DYNAMIC,
    UNSAFE_EVAL,
    UNSAFE_INLINE,
    CspDirective,
    CspDirectiveValue,
)
from cspkit.policy.frame_options import FrameOptionsMode, FrameOptionsPolicy

__all__ = [
    "HEADER_NAME",
    "LEGACY_HEADER_NAMES",
    "REPORT_ONLY_HEADER_NAME",
    "NONE",
    "SELF",
    "STRICT_DYNAMIC",
    "UNSAFE_EVAL",
    "UNSAFE_INLINE",
    "CspDirective",
    "CspDirectiveValue",
    "CspPolicy",
    "FrameOptionsMode",
    "FrameOptionsPolicy",
]
