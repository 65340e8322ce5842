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
"""conftest.py for the sce_cli package."""

import json
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock
from urllib.parse import urlsplit

import pytest
import requests
from _pytest.monkeypatch import MonkeyPatch

PUBLIC_URL = "https://api.test/public"
PORTAL_URL = "https://portal.test/portal"
NODE_URL = "https://nodes.test/api"
ORG_PATH = "/public/organizations/acme"
PROJECT_PATH = f"{ORG_PATH}/projects/demo"
API_KEY = "test-api-key"


def make_response(status: int = 200, body: Any = None, reason: str = "") -> MagicMock:  # noqa: ANN401
    """Build a mock requests.Response.

    Args:
        status: HTTP status code
        body: JSON-serializable body, raw text, or None for an empty body
        reason: HTTP reason phrase

    """
    text = "" if body is None else body if isinstance(body, str) else json.dumps(body)
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    resp.content = text.encode()
    resp.reason = reason or {200: "OK", 201: "Created", 202: "Accepted", 204: "No Content"}.get(status, "Error")
    resp.headers = {}
    return resp


class FakeApi:
    """Routes requests to canned responses and records every call."""

    def __init__(self) -> None:
        """Initialize an empty route table."""
        self.routes: dict[tuple[str, str], list[MagicMock | Exception]] = {}
        self.calls: list[dict[str, Any]] = []

    def add(self, method: str, path: str, status: int = 200, body: Any = None) -> None:  # noqa: ANN401
        """Queue a response for a method and URL path; the last one repeats."""
        self.routes.setdefault((method, path), []).append(make_response(status, body))

    def fail(self, method: str, path: str, exc: Exception) -> None:
        """Raise a transport exception for a method and URL path."""
        self.routes.setdefault((method, path), []).append(exc)

    def calls_to(self, method: str, path: str) -> list[dict[str, Any]]:
        """Get the recorded calls for a method and URL path."""
        return [c for c in self.calls if c["method"] == method and c["path"] == path]

    def handle(self, method: str, url: str, **kwargs: Any) -> MagicMock:  # noqa: ANN401
        """Answer one request."""
        path = urlsplit(url).path
        self.calls.append({"method": method, "url": url, "path": path, **kwargs})
        queued = self.routes.get((method, path))
        if not queued:
            return make_response(404, {"title": "Not Found", "path": path}, reason="Not Found")
        answer = queued.pop(0) if len(queued) > 1 else queued[0]
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture(autouse=True)
def sce_env(monkeypatch: MonkeyPatch, tmp_path: Path) -> Path:
    """Point the client at a private config directory and fake API urls.

    Returns:
        The configuration directory

    """
    config_dir = tmp_path / "sce-config"
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    monkeypatch.setenv("SCE_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("SCE_APIKEY", API_KEY)
    monkeypatch.setenv("SCE_ORGANIZATION_NAME", "acme")
    monkeypatch.setenv("SCE_PROJECT_NAME", "demo")
    monkeypatch.setenv("SCE_PUBLIC_URL", PUBLIC_URL)
    monkeypatch.setenv("SCE_PORTAL_URL", PORTAL_URL)
    monkeypatch.setenv("SCE_NODE_URL", NODE_URL)
    for name in ("SCE_VERBOSE", "SCE_DRY_RUN", "SCE_LOG_FILE", "SCE_COOKIE_JAR", "SCE_NODE_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    return config_dir


@pytest.fixture(autouse=True)
def fake_api(monkeypatch: MonkeyPatch) -> Generator[FakeApi, None, None]:
    """Replace the network with a FakeApi for every session."""
    api = FakeApi()

    def _request(_session: requests.Session, method: str, url: str, **kwargs: Any) -> MagicMock:  # noqa: ANN401
        return api.handle(method, url, **kwargs)

    monkeypatch.setattr(requests.Session, "request", _request)
    yield api
