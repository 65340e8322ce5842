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

"""Define base classes and functionality for SCE operations.

This module provides the base class shared by the SCE handlers: configuration
directory and defaults file handling, session credential loading, logging setup
and the per-invocation request context.
"""

import logging
import os
from abc import ABC
from http.cookiejar import LoadError, MozillaCookieJar
from pathlib import Path
from typing import Any

import attrs
import yaml
from rich.console import Console
from rich.logging import RichHandler

from .errors import PreconditionError

DEFAULT_PUBLIC_URL = "https://api.salad.com/api/public"
DEFAULT_PORTAL_URL = "https://portal-api.salad.com/api/portal"
DEFAULT_NODE_URL = "https://api.salad.com/api/nodes"

CONFIG_KEYS = ("organization", "project", "public_url", "portal_url", "node_url")


@attrs.frozen
class RequestContext:
    """Per-invocation settings, fixed once the global options are parsed."""

    organization: str | None
    project: str | None
    json_output: bool = False
    verbose: bool = False
    dry_run: bool = False
    trace: bool = False


class SceBase(ABC):  # noqa: B024
    """Base class for SCE operations.

    This abstract base class provides common functionality for SCE handlers,
    including configuration handling, credential loading and logging setup.
    """

    CONFIG_DIR = ".config/sce"
    CONFIG_NAME = "config.yaml"
    APIKEY_NAME = "apikey"
    COOKIE_JAR_NAME = "cookie-jar"

    def __init__(  # noqa: PLR0913
        self,
        *,
        organization: str | None = None,
        project: str | None = None,
        json_output: bool = False,
        verbose: bool = False,
        dry_run: bool = False,
        trace: bool = False,
        config_dir: str | None = None,
        cookie_jar: str | None = None,
        log_file: str | None = None,
        public_url: str | None = None,
        portal_url: str | None = None,
        node_url: str | None = None,
        node_token: str | None = None,
    ) -> None:
        """Initialize the SCE base class.

        Args:
            organization: Organization name
            project: Project name
            json_output: Print raw JSON instead of condensed text
            verbose: Echo outgoing calls, secrets included
            dry_run: Print would-be calls instead of executing them
            trace: Enable execution tracing
            config_dir: Configuration directory
            cookie_jar: Cookie jar path for the portal session
            log_file: File receiving a trace of every HTTP exchange
            public_url: Base URL of the public API
            portal_url: Base URL of the portal API
            node_url: Base URL of the node API
            node_token: Bearer token for the node API

        """
        self.console = Console(stderr=True)

        rh = RichHandler(show_path=False, console=self.console)
        rh.setFormatter(logging.Formatter("%(message)s"))
        fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        logging.basicConfig(level=logging.INFO, format=fmt, handlers=[rh])
        self.logger = logging.getLogger(__name__)
        if trace:
            logging.getLogger("sce_cli").setLevel(logging.DEBUG)
            logging.getLogger("urllib3").setLevel(logging.DEBUG)

        self.cfgdir = Path(config_dir).expanduser() if config_dir else Path.home() / self.CONFIG_DIR
        self.cfg: dict[str, Any] = {}
        self.load_config()

        self.context = RequestContext(
            organization=organization or self.cfg.get("organization"),
            project=project or self.cfg.get("project"),
            json_output=json_output,
            verbose=verbose,
            dry_run=dry_run,
            trace=trace,
        )
        self.public_url: str = public_url or self.cfg.get("public_url") or DEFAULT_PUBLIC_URL
        self.portal_url: str = portal_url or self.cfg.get("portal_url") or DEFAULT_PORTAL_URL
        self.node_url: str = node_url or self.cfg.get("node_url") or DEFAULT_NODE_URL
        self.node_token = node_token
        self.cookie_jar_path = Path(cookie_jar).expanduser() if cookie_jar else self.cfgdir / self.COOKIE_JAR_NAME
        self.log_file = log_file

    @property
    def config_path(self) -> Path:
        """Get the path of the defaults file."""
        return self.cfgdir / self.CONFIG_NAME

    @property
    def apikey_path(self) -> Path:
        """Get the path of the API key file."""
        return self.cfgdir / self.APIKEY_NAME

    @property
    def config(self) -> dict[str, Any]:
        """Get the current configuration.

        Returns:
            The current configuration dictionary.

        """
        return self.cfg

    def load_config(self) -> dict[str, Any] | None:
        """Load defaults from config.yaml.

        Returns:
            The loaded configuration dictionary, or None if no configuration exists.

        """
        try:
            with self.config_path.open() as fc:
                loaded = yaml.safe_load(fc)
            if isinstance(loaded, dict):
                self.cfg = {k: v for k, v in loaded.items() if k in CONFIG_KEYS and v is not None}
        except FileNotFoundError:
            pass
        except (OSError, UnicodeDecodeError, yaml.YAMLError):
            self.logger.warning("Ignoring unreadable configuration file %s", self.config_path)
        return None if len(self.cfg) == 0 else self.config

    def save_config(self, **values: str | None) -> dict[str, Any]:
        """Merge values into config.yaml and write it back.

        Args:
            **values: Configuration keys to set; None leaves a key unchanged

        Returns:
            The updated configuration dictionary.

        Raises:
            OSError: If the configuration cannot be written

        """
        for key, value in values.items():
            if key in CONFIG_KEYS and value is not None:
                self.cfg[key] = value

        Path(self.cfgdir).mkdir(mode=0o700, parents=True, exist_ok=True)
        with self.config_path.open("w") as fc:
            yaml.safe_dump(self.cfg, fc, default_flow_style=False, sort_keys=True)
        self.config_path.chmod(0o600)
        self.logger.info("Saved Config in %s", self.config_path)
        return self.cfg

    def load_api_key(self) -> str | None:
        """Read the API key from SCE_APIKEY or the first line of the API key file.

        Returns:
            The API key, or None if none is configured

        """
        key = (os.environ.get("SCE_APIKEY") or "").strip()
        if key:
            return key
        try:
            lines = self.apikey_path.read_text().splitlines()
        except (OSError, UnicodeDecodeError):
            return None
        if not lines:
            return None
        return lines[0].strip() or None

    def require_api_key(self) -> str:
        """Get the API key or fail before any call is made.

        Raises:
            PreconditionError: If no API key is configured

        """
        key = self.load_api_key()
        if key is None:
            error_msg = f"missing API key (set SCE_APIKEY or write it to {self.apikey_path})"
            raise PreconditionError(error_msg)
        return key

    def load_cookie_jar(self) -> MozillaCookieJar:
        """Load the portal session cookies; a missing jar yields an empty one."""
        jar = MozillaCookieJar(str(self.cookie_jar_path))
        if self.cookie_jar_path.is_file():
            try:
                jar.load(ignore_discard=True, ignore_expires=True)
            except (LoadError, OSError):
                self.logger.warning("Ignoring unreadable cookie jar %s", self.cookie_jar_path)
        return jar

    def require_organization(self) -> str:
        """Get the organization name or fail before any call is made."""
        if not self.context.organization:
            error_msg = "missing organization (pass -o or set SCE_ORGANIZATION_NAME)"
            raise PreconditionError(error_msg)
        return self.context.organization

    def require_project(self) -> str:
        """Get the project name or fail before any call is made."""
        if not self.context.project:
            error_msg = "missing project (pass -p or set SCE_PROJECT_NAME)"
            raise PreconditionError(error_msg)
        return self.context.project
