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
"""Test organization, project and node commands."""

import json
from typing import Any

from click.testing import Result
from typer.testing import CliRunner

from sce_cli.cli import hoist_global_options, sce_app

runner = CliRunner()

_ORG = "/public/organizations/acme"


def _invoke(*args: str) -> Result:
    return runner.invoke(sce_app, hoist_global_options(list(args)))


def test_project_list(fake_api: Any) -> None:  # noqa: ANN401
    """Test condensed project listing.

    Args:
        fake_api: The fake API.

    """
    projects = {"items": [{"id": "p1", "name": "demo", "display_name": "Demo", "create_time": "t0"}]}
    fake_api.add("GET", f"{_ORG}/projects", 200, projects)
    result = _invoke("project-list")
    assert result.exit_code == 0
    assert result.output == "p1 demo Demo t0\n"


def test_project_create(fake_api: Any) -> None:  # noqa: ANN401
    """Test project creation with and without a display name.

    Args:
        fake_api: The fake API.

    """
    fake_api.add("POST", f"{_ORG}/projects", 201, {"id": "p2", "name": "new-proj"})

    result = _invoke("project-create", "new-proj")
    assert result.exit_code == 0
    assert json.loads(fake_api.calls[-1]["data"]) == {"name": "new-proj", "display_name": "new-proj"}

    result = _invoke("project-create", "new-proj", "--display-name", "New Project")
    assert result.exit_code == 0
    assert json.loads(fake_api.calls[-1]["data"]) == {"name": "new-proj", "display_name": "New Project"}


def test_project_create_invalid_name(fake_api: Any) -> None:  # noqa: ANN401
    """Test that an invalid project name is rejected before any call.

    Args:
        fake_api: The fake API.

    """
    result = _invoke("project-create", "Bad_Name")
    assert result.exit_code == 2
    assert fake_api.calls == []


def test_project_delete(fake_api: Any) -> None:  # noqa: ANN401
    """Test project deletion.

    Args:
        fake_api: The fake API.

    """
    fake_api.add("DELETE", f"{_ORG}/projects/old", 204)
    result = _invoke("project-delete", "old")
    assert result.exit_code == 0
    assert result.output == "Project 'old' was deleted\n"


def test_gpu_quota_and_webhook(fake_api: Any) -> None:  # noqa: ANN401
    """Test organization level read commands.

    Args:
        fake_api: The fake API.

    """
    gpus = {"items": [{"id": "g1", "name": "rtx4090", "is_high_demand": True}]}
    quotas = {"container_groups_quotas": {"max_created_container_groups": 10}}
    fake_api.add("GET", f"{_ORG}/gpu-classes", 200, gpus)
    fake_api.add("GET", f"{_ORG}/quotas", 200, quotas)
    fake_api.add("GET", f"{_ORG}/webhook-secret-key", 200, {"secret_key": "whsec"})

    result = _invoke("gpu-list")
    assert result.output == "g1 rtx4090 true\n"

    result = _invoke("quota-get")
    assert result.exit_code == 0
    assert json.loads(result.output) == quotas

    result = _invoke("webhook-secret-get")
    assert result.output == "whsec\n"


def test_node_list_requires_token(fake_api: Any) -> None:  # noqa: ANN401
    """Test that node commands need a bearer token.

    Args:
        fake_api: The fake API.

    """
    result = _invoke("node-list")
    assert result.exit_code == 1
    assert fake_api.calls == []


def test_node_commands(fake_api: Any) -> None:  # noqa: ANN401
    """Test node listing and lookup with a token.

    Args:
        fake_api: The fake API.

    """
    node = {"id": "n1", "name": "node-1", "state": "online", "gpu_class": "rtx4090"}
    fake_api.add("GET", "/api/nodes", 200, {"items": [node]})
    fake_api.add("GET", "/api/nodes/n1", 200, node)

    result = _invoke("node-list", "--node-token", "tok")
    assert result.exit_code == 0
    assert result.output == "n1 node-1 online rtx4090\n"

    result = _invoke("node-get", "n1", "--node-token", "tok")
    assert result.exit_code == 0
    assert result.output == "n1 node-1 online rtx4090\n"
