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
"""Tests for CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from cspkit.cli.main import cli

CONFIG = (
    "cspkit:\n"
    "  headers:\n"
    "    frame-options: sameorigin\n"
    "    directives:\n"
    "      script-src: [\"'self'\"]\n"
)


def _write_config(tmp_path: Path, text: str = CONFIG) -> Path:
    config_file = tmp_path / "cspkit.yaml"
    config_file.write_text(text)
    return config_file


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestCLI:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "render" in result.output
        assert "directives" in result.output

    def test_directives_lists_canonical_order(self):
        result = CliRunner().invoke(cli, ["directives"])
        assert result.exit_code == 0, result.output
        assert result.output.index("default-src") < result.output.index("frame-ancestors")


class TestRenderCommand:
    def test_render_html(self, tmp_path: Path):
        config_file = _write_config(tmp_path)
        result = CliRunner().invoke(cli, ["render", "--config", str(config_file)])

        assert result.exit_code == 0, result.output
        assert "Content-Security-Policy: default-src 'self'; script-src 'self'" in result.output
        assert "X-WebKit-CSP: default-src 'self'; script-src 'self'" in result.output
        assert "X-Frame-Options: SAMEORIGIN" in result.output

    def test_render_development_error(self, tmp_path: Path):
        config_file = _write_config(tmp_path)
        result = CliRunner().invoke(
            cli, ["render", "--config", str(config_file), "--status", "500", "--development"]
        )

        assert result.exit_code == 0, result.output
        assert "script-src 'self' 'unsafe-inline'; style-src 'unsafe-inline'" in result.output

    def test_render_json_has_no_headers(self, tmp_path: Path):
        config_file = _write_config(tmp_path)
        result = CliRunner().invoke(
            cli, ["render", "--config", str(config_file), "--content-type", "application/json"]
        )

        assert result.exit_code == 0, result.output
        assert "No security headers" in result.output
        assert "X-WebKit-CSP" not in result.output
        assert "X-Frame-Options:" not in result.output

    def test_render_profile_overlay(self, tmp_path: Path):
        config_file = _write_config(tmp_path)
        (tmp_path / "cspkit-staging.yaml").write_text("cspkit:\n  headers:\n    report-only: true\n")
        result = CliRunner().invoke(cli, ["render", "--config", str(config_file), "--profile", "staging"])

        assert result.exit_code == 0, result.output
        assert "Content-Security-Policy-Report-Only:" in result.output

    def test_render_invalid_config_exits_1(self, tmp_path: Path):
        config_file = _write_config(tmp_path, "cspkit:\n  headers:\n    frame-options: allowall\n")
        result = CliRunner().invoke(cli, ["render", "--config", str(config_file)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_render_malformed_yaml_exits_1(self, tmp_path: Path):
        config_file = _write_config(tmp_path, "cspkit:\n  headers: [unclosed\n")
        result = CliRunner().invoke(cli, ["render", "--config", str(config_file)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert "Traceback" not in result.output

    def test_render_uses_configured_log_format(self, tmp_path: Path):
        config_file = _write_config(tmp_path, CONFIG + "  logging:\n    format: json\n")
        result = CliRunner().invoke(cli, ["render", "--config", str(config_file)])

        assert result.exit_code == 0, result.output
        assert '"logger": "cspkit.web.properties"' in result.output
        assert "Content-Security-Policy: default-src 'self'; script-src 'self'" in result.output
