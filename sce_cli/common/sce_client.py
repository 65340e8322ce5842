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

"""SCE HTTP client implementation.

This module provides the transport adapter used by every API primitive: a single
request goes out, and its status, body and transport exit code come back as one
``CallResult`` value. The verb helpers attach the default JSON headers and the
session credential, and honour the verbose and dry-run modes.
"""

import copy
import json
import shlex
import time
from http.cookiejar import CookieJar
from logging import Logger
from pathlib import Path
from typing import Any

import attrs
import requests
import typer
from requests import Response

from .errors import TransportError

SUCCESS_STATUSES = frozenset({200, 201, 202, 204})

_REDACTED_HEADERS = {"authorization", "salad-api-key", "cookie", "set-cookie"}

# curl exit codes for the equivalent failures
_EXIT_MALFORMED_URL = 3
_EXIT_CONNECT = 7
_EXIT_TIMEOUT = 28
_EXIT_SSL = 35


@attrs.frozen
class CallResult:
    """The outcome of one HTTP call.

    A result is produced once per transport call and never mutated; a new call
    yields a new value.
    """

    method: str
    url: str
    status: int
    body: str = ""
    reason: str = ""
    exit_code: int = 0
    dry_run: bool = False

    @property
    def is_success(self) -> bool:
        """Check if the status is in the success set (200, 201, 202, 204)."""
        return self.status in SUCCESS_STATUSES

    @property
    def has_body(self) -> bool:
        """Check if the response carried a non-blank body."""
        return bool(self.body.strip())

    @property
    def status_line(self) -> str:
        """Get a one-line description of the HTTP status."""
        return f"HTTP {self.status} {self.reason}".rstrip()

    def json(self) -> Any:  # noqa: ANN401
        """Decode the response body.

        Returns:
            The decoded JSON value, or None when the body is empty

        Raises:
            ValueError: If the body is not valid JSON

        """
        if not self.has_body:
            return None
        return json.loads(self.body)


def _transport_exit_code(exc: requests.RequestException) -> int:
    """Map a requests exception onto the exit code curl uses for the same failure."""
    if isinstance(exc, (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema)):
        return _EXIT_MALFORMED_URL
    if isinstance(exc, requests.exceptions.SSLError):
        return _EXIT_SSL
    if isinstance(exc, requests.exceptions.Timeout):
        return _EXIT_TIMEOUT
    if isinstance(exc, requests.exceptions.ConnectionError):
        return _EXIT_CONNECT
    return 1


class SceClient:
    """Client for one SCE API base URL.

    This class owns a requests session preloaded with the default headers and,
    outside of dry-run mode, with the credential for that API.
    """

    def __init__(  # noqa: PLR0913
        self,
        logger: Logger,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        cookies: CookieJar | None = None,
        cookie_file: str | None = None,
        verbose: bool = False,
        dry_run: bool = False,
        log_file: str | None = None,
    ) -> None:
        """Initialize the SCE client.

        Args:
            logger: Logger instance for logging operations
            url: Base URL of the API
            headers: Authentication headers for this API
            cookies: Cookie jar holding the portal session
            cookie_file: Path of the cookie jar, only used when echoing commands
            verbose: Echo every outgoing request, secrets included, on stderr
            dry_run: Print the would-be request instead of sending it
            log_file: Optional file receiving a trace of every exchange

        """
        self.url = url.rstrip("/")
        self.logger = logger
        self.verbose = verbose
        self.dry_run = dry_run
        self.trace = log_file
        self.cookie_file = cookie_file
        self.headers: dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        self.auth_headers: dict[str, str] = dict(headers or {})
        self.ses = requests.Session()
        self.ses.headers.update(self.headers)
        if not self.dry_run:
            self.ses.headers.update(self.auth_headers)
            if cookies is not None:
                self.ses.cookies = cookies  # type: ignore[assignment]

    def full_url(self, endpoint: str) -> str:
        """Resolve an endpoint against the base URL; absolute URLs pass through."""
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.url}/{endpoint.lstrip('/')}"

    def as_curl(
        self,
        method: str,
        url: str,
        data: str | None = None,
        params: dict[str, Any] | None = None,
        *,
        with_secrets: bool,
    ) -> str:
        """Render a request as the equivalent curl command line.

        Args:
            method: HTTP verb
            url: Fully formed URL
            data: Optional request body
            params: Optional query parameters
            with_secrets: Whether to include the credential headers

        Returns:
            A shell-quoted curl command

        """
        if params:
            url = requests.Request(method, url, params=params).prepare().url or url
        hdrs = dict(self.headers)
        if with_secrets:
            hdrs.update(self.auth_headers)
        cmd = ["curl", "-sS", "-X", method]
        for k, v in hdrs.items():
            cmd.extend(["-H", f"{k}: {v}"])
        if with_secrets and self.cookie_file:
            cmd.extend(["-b", self.cookie_file])
        if data is not None:
            cmd.extend(["--data-binary", data])
        cmd.append(url)
        return shlex.join(cmd)

    def _log(self, resp: Response) -> None:
        """Append request and response details to the trace file.

        Args:
            resp: The response object to log

        """
        if not self.trace:
            return

        def _redact(items: Any) -> dict[str, str]:  # noqa: ANN401
            return {k: ("[REDACTED]" if k.lower() in _REDACTED_HEADERS else str(v)) for k, v in items.items()}

        def _indent(text: bytes | str | None) -> str:
            if text is None:
                return ""
            if isinstance(text, bytes):
                text = text.decode(errors="replace")
            try:
                text = json.dumps(json.loads(text), indent=2, sort_keys=True)
            except (json.JSONDecodeError, TypeError):
                text = f"|\n{text!s}"

            return "\n".join("    " + str(line) for line in text.splitlines())

        try:
            with Path(self.trace).open("a") as tfd:
                tfd.write(f"--- # {time.strftime('%Y-%m-%d %H:%M:%S %Z')}\n")
                req = resp.request
                tfd.write("request:\n")
                tfd.write(f"  method: '{req.method}'\n")
                tfd.write(f"  url: '{req.url}'\n")
                tfd.write("  headers:\n")
                for k, v in _redact(copy.copy(req.headers)).items():
                    tfd.write(f'    {k}: "{v}"\n')
                tfd.write(f"  body: |\n{_indent(req.body)}\n")
                tfd.write("response:\n")
                tfd.write(f"  status: {resp.status_code}\n")
                tfd.write(f"  reason: '{resp.reason or 'None'}'\n")
                tfd.write("  headers:\n")
                for k, v in _redact(copy.copy(resp.headers)).items():
                    tfd.write(f'    {k}: "{v}"\n')
                tfd.write(f"  body:{_indent(resp.text)}\n")
        except OSError:
            err_msg = f"{self.trace}: Failed to write trace: "
            self.logger.exception(err_msg)

    def request(
        self,
        method: str,
        endpoint: str,
        data: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> CallResult:
        """Perform one HTTP request.

        Args:
            method: HTTP verb
            endpoint: Path below the base URL, or an absolute URL
            data: Optional request body, sent as-is
            params: Optional query parameters

        Returns:
            The call result; HTTP error statuses are returned, not raised

        Raises:
            TransportError: If no HTTP response was received

        """
        url = self.full_url(endpoint)
        if self.dry_run:
            typer.echo(self.as_curl(method, url, data, params, with_secrets=False))
            return CallResult(method=method, url=url, status=0, dry_run=True)

        if self.verbose:
            typer.echo(self.as_curl(method, url, data, params, with_secrets=True), err=True)

        self.logger.debug("%s %s", method, url)
        try:
            resp = self.ses.request(
                method,
                url,
                data=data.encode() if data is not None else None,
                params=params,
                allow_redirects=False,
            )
        except requests.RequestException as e:
            error_msg = f"{method} {url}: {e!s}"
            raise TransportError(error_msg, exit_code=_transport_exit_code(e)) from e

        self._log(resp)
        result = CallResult(
            method=method,
            url=url,
            status=resp.status_code,
            body=resp.text or "",
            reason=resp.reason or "",
        )
        self.logger.debug("%s %s -> %s", method, url, result.status_line)
        return result

    def get(self, endpoint: str, params: dict[str, Any] | None = None) -> CallResult:
        """Make a GET request."""
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, data: str | None = None) -> CallResult:
        """Make a POST request."""
        return self.request("POST", endpoint, data=data)

    def patch(self, endpoint: str, data: str | None = None) -> CallResult:
        """Make a PATCH request."""
        return self.request("PATCH", endpoint, data=data)

    def put(self, endpoint: str, data: str | None = None) -> CallResult:
        """Make a PUT request."""
        return self.request("PUT", endpoint, data=data)

    def delete(self, endpoint: str) -> CallResult:
        """Make a DELETE request."""
        return self.request("DELETE", endpoint)
