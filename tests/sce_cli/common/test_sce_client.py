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
"""Test sce call result and sce client functionality."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from sce_cli.common import CallResult, SceClient, TransportError

_OK = 200
_NO_CONTENT = 204
_NOT_FOUND = 404


def _mock_response(status: int, text: str = "", reason: str = "OK") -> MagicMock:
    mock_response = MagicMock()
    mock_response.status_code = status
    mock_response.text = text
    mock_response.reason = reason
    mock_response.headers = {}
    return mock_response


def test_call_result_properties() -> None:
    """Test call result properties."""
    result = CallResult(method="GET", url="u", status=200, body='{"a": 1}', reason="OK")
    assert result.is_success
    assert result.has_body
    assert result.status_line == "HTTP 200 OK"
    assert result.json() == {"a": 1}

    result = CallResult(method="DELETE", url="u", status=204, body="  \n", reason="No Content")
    assert result.is_success
    assert not result.has_body
    assert result.json() is None

    result = CallResult(method="GET", url="u", status=404, body="not json")
    assert not result.is_success
    assert result.status_line == "HTTP 404"
    with pytest.raises(ValueError):  # noqa: PT011
        result.json()

    for status in (0, 203, 301, 400, 500):
        assert not CallResult(method="GET", url="u", status=status).is_success


def test_full_url() -> None:
    """Test endpoint resolution against the base url."""
    client = SceClient(logger=MagicMock(), url="https://api.test/public/")
    assert client.full_url("/organizations/acme") == "https://api.test/public/organizations/acme"
    assert client.full_url("organizations") == "https://api.test/public/organizations"
    assert client.full_url("https://other.test/x") == "https://other.test/x"


def test_get_success() -> None:
    """Test sce client get."""
    client = SceClient(logger=MagicMock(), url="https://api.test", headers={"Salad-Api-Key": "k"})
    assert client.ses.headers["Salad-Api-Key"] == "k"
    assert client.ses.headers["Accept"] == "application/json"

    client.ses.request = MagicMock(return_value=_mock_response(_OK, json.dumps({"items": []})))
    result = client.get("/things", params={"page": 2})

    client.ses.request.assert_called_once_with(
        "GET",
        "https://api.test/things",
        data=None,
        params={"page": 2},
        allow_redirects=False,
    )
    assert result.status == _OK
    assert result.method == "GET"
    assert result.url == "https://api.test/things"
    assert result.json() == {"items": []}
    assert not result.dry_run


def test_body_is_sent_unchanged() -> None:
    """Test that the request body is forwarded as-is."""
    client = SceClient(logger=MagicMock(), url="https://api.test")
    client.ses.request = MagicMock(return_value=_mock_response(_NO_CONTENT, reason="No Content"))
    body = '{ "name" : "web" }'

    for verb, call in (("POST", client.post), ("PATCH", client.patch), ("PUT", client.put)):
        result = call("/things", data=body)
        assert result.method == verb
        assert client.ses.request.call_args.kwargs["data"] == body.encode()

    result = client.delete("/things/1")
    assert result.status == _NO_CONTENT
    assert client.ses.request.call_args.kwargs["data"] is None


def test_http_error_is_returned() -> None:
    """Test that an HTTP error status is returned, not raised."""
    client = SceClient(logger=MagicMock(), url="https://api.test")
    client.ses.request = MagicMock(return_value=_mock_response(_NOT_FOUND, '{"title": "gone"}', "Not Found"))
    result = client.get("/things/1")
    assert result.status == _NOT_FOUND
    assert not result.is_success
    assert result.json() == {"title": "gone"}
    assert result.exit_code == 0


@pytest.mark.parametrize(
    ("exc", "exit_code"),
    [
        (requests.exceptions.ConnectionError("refused"), 7),
        (requests.exceptions.ReadTimeout("slow"), 28),
        (requests.exceptions.SSLError("bad cert"), 35),
        (requests.exceptions.MissingSchema("no scheme"), 3),
        (requests.exceptions.InvalidURL("bad url"), 3),
        (requests.exceptions.RequestException("other"), 1),
    ],
)
def test_transport_failure(exc: Exception, exit_code: int) -> None:
    """Test that transport failures carry the matching exit code."""
    client = SceClient(logger=MagicMock(), url="https://api.test")
    client.ses.request = MagicMock(side_effect=exc)
    with pytest.raises(TransportError) as e:
        client.get("/things")
    assert e.value.exit_code == exit_code
    assert "GET https://api.test/things" in str(e.value)


def test_dry_run(capsys: pytest.CaptureFixture[str]) -> None:
    """Test that dry-run prints the call without sending it or exposing secrets."""
    client = SceClient(logger=MagicMock(), url="https://api.test", headers={"Salad-Api-Key": "secret"}, dry_run=True)
    assert "Salad-Api-Key" not in client.ses.headers
    client.ses.request = MagicMock()

    result = client.post("/things", data='{"a": 1}')

    client.ses.request.assert_not_called()
    assert result.dry_run
    assert result.status == 0
    out = capsys.readouterr().out
    assert out.startswith("curl ")
    assert "-X POST" in out
    assert "https://api.test/things" in out
    assert "secret" not in out


def test_verbose_echoes_secrets(capsys: pytest.CaptureFixture[str]) -> None:
    """Test that verbose mode echoes the full call, credential included, on stderr."""
    client = SceClient(logger=MagicMock(), url="https://api.test", headers={"Salad-Api-Key": "secret"}, verbose=True)
    client.ses.request = MagicMock(return_value=_mock_response(_OK, "{}"))

    client.get("/things")

    captured = capsys.readouterr()
    assert "Salad-Api-Key: secret" in captured.err
    assert "https://api.test/things" in captured.err
    assert captured.out == ""


def test_as_curl_query_and_cookie_file() -> None:
    """Test curl rendering of query parameters and the cookie jar."""
    client = SceClient(logger=MagicMock(), url="https://portal.test", cookie_file="/tmp/jar")  # noqa: S108
    cmd = client.as_curl("GET", "https://portal.test/users/me", params={"q": "a b"}, with_secrets=True)
    assert "'https://portal.test/users/me?q=a+b'" in cmd
    assert "-b /tmp/jar" in cmd
    cmd = client.as_curl("GET", "https://portal.test/users/me", with_secrets=False)
    assert "-b" not in cmd.split()


def test_trace_file_redacts_credentials(tmp_path: Path) -> None:
    """Test that the trace file records exchanges with credentials redacted."""
    trace = tmp_path / "trace.log"
    client = SceClient(logger=MagicMock(), url="https://api.test", log_file=str(trace))

    mock_response = _mock_response(_OK, json.dumps({"name": "web"}))
    mock_response.headers = {"Set-Cookie": "sid=abc", "Content-Type": "application/json"}
    mock_response.request.method = "POST"
    mock_response.request.url = "https://api.test/things"
    mock_response.request.headers = {"Salad-Api-Key": "secret", "Accept": "application/json"}
    mock_response.request.body = b'{"name": "web"}'
    client.ses.request = MagicMock(return_value=mock_response)

    client.post("/things", data='{"name": "web"}')

    text = trace.read_text()
    assert "method: 'POST'" in text
    assert "status: 200" in text
    assert '"name": "web"' in text
    assert "secret" not in text
    assert "sid=abc" not in text
    assert text.count("[REDACTED]") == 2
