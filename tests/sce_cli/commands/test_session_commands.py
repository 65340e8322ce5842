# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Test portal session and configuration commands."""

import json
import logging
from pathlib import Path
from typing import Any

import pytest
import yaml
from _pytest.monkeypatch import MonkeyPatch
from click.testing import Result
from typer.testing import CliRunner

from sce_cli.cli import hoist_global_options, sce_app

runner = CliRunner()

_URL_ENVS = ("SCE_ORGANIZATION_NAME", "SCE_PROJECT_NAME", "SCE_PUBLIC_URL", "SCE_PORTAL_URL", "SCE_NODE_URL")


def _invoke(*args: str) -> Result:
    return runner.invoke(sce_app, hoist_global_options(list(args)))


def test_login_logout(fake_api: Any, sce_env: Path) -> None:  # noqa: ANN401
    """Test that login stores the cookie jar and logout removes it.

    Args:
        fake_api: The fake API.
        sce_env: The configuration directory.

    """
    fake_api.add("POST", "/portal/users/login", 200, {"id": "u1"})
    fake_api.add("POST", "/portal/users/logout", 204)

    result = _invoke("login", "--email", "me@example.com", "--password", "pw")
    assert result.exit_code == 0
    assert result.output == "Logged in as me@example.com\n"
    assert json.loads(fake_api.calls[0]["data"]) == {"email": "me@example.com", "password": "pw"}
    assert (sce_env / "cookie-jar").is_file()

    result = _invoke("logout")
    assert result.exit_code == 0
    assert result.output == "Logged out\n"
    assert not (sce_env / "cookie-jar").exists()


def test_login_dry_run_hides_password(fake_api: Any, sce_env: Path) -> None:  # noqa: ANN401
    """Test that a dry-run login prints the request without the password.

    Args:
        fake_api: The fake API.
        sce_env: The configuration directory.

    """
    result = _invoke("login", "--email", "me@example.com", "--password", "hunter2", "--dry-run")
    assert result.exit_code == 0
    assert fake_api.calls == []
    assert "curl" in result.output
    assert "me@example.com" in result.output
    assert "[REDACTED]" in result.output
    assert "hunter2" not in result.output
    assert not (sce_env / "cookie-jar").exists()


def test_login_rejected(fake_api: Any, sce_env: Path) -> None:  # noqa: ANN401
    """Test that a rejected login exits non-zero and stores nothing.

    Args:
        fake_api: The fake API.
        sce_env: The configuration directory.

    """
    fake_api.add("POST", "/portal/users/login", 401, {"title": "Unauthorized"})
    result = _invoke("login", "--email", "me@example.com", "--password", "bad")
    assert result.exit_code == 1
    assert "HTTP 401" in result.output
    assert not (sce_env / "cookie-jar").exists()


def test_whoami_and_org_list(fake_api: Any) -> None:  # noqa: ANN401
    """Test portal read commands.

    Args:
        fake_api: The fake API.

    """
    fake_api.add("GET", "/portal/users/me", 200, {"id": "u1", "username": "me", "email": "me@example.com"})
    fake_api.add("GET", "/portal/organizations", 200, {"items": [{"id": "o1", "name": "acme", "display_name": "Acme"}]})

    result = _invoke("whoami")
    assert result.output == "u1 me me@example.com\n"

    result = _invoke("org-list")
    assert result.output == "o1 acme Acme\n"


def test_config_set_and_get(fake_api: Any, sce_env: Path, monkeypatch: MonkeyPatch) -> None:  # noqa: ANN401
    """Test that config-set saves defaults that later invocations pick up.

    Args:
        fake_api: The fake API.
        sce_env: The configuration directory.
        monkeypatch: The monkeypatch object.

    """
    for name in _URL_ENVS:
        monkeypatch.delenv(name)

    result = _invoke("config-set", "-o", "saved-org", "-p", "saved-proj")
    assert result.exit_code == 0
    saved = yaml.safe_load((sce_env / "config.yaml").read_text())
    assert saved == {"organization": "saved-org", "project": "saved-proj"}

    result = _invoke("config-get")
    assert result.exit_code == 0
    assert "saved-org" in result.output
    assert "[REDACTED]" in result.output
    assert "test-api-key" not in result.output

    fake_api.add("GET", "/api/public/organizations/saved-org/projects/saved-proj/queues", 200, {"items": []})
    result = _invoke("q-list")
    assert result.exit_code == 0
    assert fake_api.calls[-1]["url"].startswith("https://api.salad.com/api/public/organizations/saved-org/")
    assert fake_api.calls == fake_api.calls_to("GET", "/api/public/organizations/saved-org/projects/saved-proj/queues")


def test_config_set_nothing(
    fake_api: Any,  # noqa: ANN401
    sce_env: Path,
    monkeypatch: MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Test that config-set without values is an error.

    Args:
        fake_api: The fake API.
        sce_env: The configuration directory.
        monkeypatch: The monkeypatch object.
        caplog: The caplog object.

    """
    for name in _URL_ENVS:
        monkeypatch.delenv(name)
    with caplog.at_level(logging.ERROR):
        result = _invoke("config-set")
    assert result.exit_code == 1
    assert "Nothing to set" in caplog.text
    assert not (sce_env / "config.yaml").exists()
    assert fake_api.calls == []
