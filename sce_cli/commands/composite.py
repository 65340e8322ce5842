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

"""Commands combining several API calls.

``project-status`` correlates container groups with queues on the client, from
one list of each, because the API has no joined view. ``project-clean`` removes
every container group and every queue of a project, one delete at a time.
"""

import json
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import attrs
import typer
from typer import Context

from sce_cli.api import SceApi
from sce_cli.common.dispatch import expect_success, register_command, render_error
from sce_cli.common.errors import ApiError, PreconditionError, TransportError
from sce_cli.common.formatters import list_items
from sce_cli.common.records import MISSING, ContainerGroup, Queue, Server, dig


@attrs.frozen
class ProjectStatus:
    """Container groups, the queues they serve, and their servers."""

    groups: list[ContainerGroup]
    queues: dict[str, list[str]]
    servers: dict[str, list[Server]]

    def as_json(self) -> dict[str, Any]:
        """Get the status as one JSON document."""
        return {
            "queues": self.queues,
            "container_groups": {
                g.name: {
                    "status": g.status,
                    "queue": None if g.queue_name == MISSING else g.queue_name,
                    "servers": [attrs.asdict(s) for s in self.servers.get(g.name, [])],
                }
                for g in self.groups
            },
        }

    def lines(self) -> list[str]:
        """Get the status as condensed text lines."""
        out = [f"queue {name}: {' '.join(groups) or MISSING}" for name, groups in self.queues.items()]
        for g in self.groups:
            out.append(f"container-group {g.name} {g.status}")
            out.extend(f"  {s.machine_id} {s.state}" for s in self.servers.get(g.name, []))
        return out


@attrs.define
class CleanReport:
    """Outcome of a best-effort project clean-up."""

    container_groups: int = 0
    queues: int = 0
    deleted_container_groups: list[str] = attrs.field(factory=list)
    deleted_queues: list[str] = attrs.field(factory=list)
    failures: list[str] = attrs.field(factory=list)

    def as_json(self) -> dict[str, Any]:
        """Get the report as one JSON document."""
        return attrs.asdict(self)

    @property
    def summary(self) -> str:
        """Get a one-line summary of the clean-up."""
        return (
            f"Deleted {len(self.deleted_container_groups)}/{self.container_groups} container groups "
            f"and {len(self.deleted_queues)}/{self.queues} queues"
        )


def collect_project_status(sce_hdl: SceApi) -> ProjectStatus:
    """Fetch container groups and queues once each, then the servers of every group.

    Args:
        sce_hdl: The SCE handler

    Returns:
        The correlated project status

    Raises:
        ApiError: If any call fails
        json.JSONDecodeError: If a list response is not JSON

    """
    groups_result = expect_success(sce_hdl.list_container_groups(), "list container groups")
    queues_result = expect_success(sce_hdl.list_queues(), "list queues")

    groups = [ContainerGroup.from_json(g) for g in list_items(groups_result.json(), "items")]
    queues = [Queue.from_json(q) for q in list_items(queues_result.json(), "items")]
    attached = {q.name: [g.name for g in groups if g.queue_name == q.name] for q in queues}

    servers: dict[str, list[Server]] = {}
    for g in groups:
        result = expect_success(sce_hdl.list_servers(g.name), f"list servers of '{g.name}'")
        servers[g.name] = [Server.from_json(s) for s in list_items(result.json(), "instances")]

    return ProjectStatus(groups=groups, queues=attached, servers=servers)


def _item_names(items: list[Any], kind: str, report: CleanReport) -> list[str]:
    """Get the names of listed items; an item without a name is recorded as a failure."""
    names = []
    for position, item in enumerate(items, start=1):
        name = dig(item, "name")
        if name == MISSING:
            report.failures.append(f"{kind} #{position}: no name in list response")
        else:
            names.append(name)
    return names


def clean_project(sce_hdl: SceApi, on_deleted: Callable[[str], None] | None = None) -> CleanReport:
    """Delete every container group, then every queue, of the project.

    A failed delete is recorded and the clean-up moves on to the next one.

    Args:
        sce_hdl: The SCE handler
        on_deleted: Called with a description of each successful delete

    Returns:
        The clean-up report

    Raises:
        ApiError: If one of the two list calls fails
        json.JSONDecodeError: If a list response is not JSON

    """
    report = CleanReport()

    groups_result = expect_success(sce_hdl.list_container_groups(), "list container groups")
    items = list_items(groups_result.json(), "items")
    report.container_groups = len(items)
    for name in _item_names(items, "container group", report):
        result = sce_hdl.delete_container_group(name)
        if result.dry_run or result.is_success:
            report.deleted_container_groups.append(name)
            if on_deleted is not None:
                on_deleted(f"Container group '{name}' was deleted")
        else:
            render_error(result)
            report.failures.append(f"container group '{name}': {result.status_line}")

    queues_result = expect_success(sce_hdl.list_queues(), "list queues")
    items = list_items(queues_result.json(), "items")
    report.queues = len(items)
    for name in _item_names(items, "queue", report):
        result = sce_hdl.delete_queue(name)
        if result.dry_run or result.is_success:
            report.deleted_queues.append(name)
            if on_deleted is not None:
                on_deleted(f"Queue '{name}' was deleted")
        else:
            render_error(result)
            report.failures.append(f"queue '{name}': {result.status_line}")

    return report


@contextmanager
def _command_errors(sce_hdl: SceApi, what: str) -> Iterator[None]:
    try:
        yield

    except ApiError as e:
        render_error(e.result)
        raise typer.Exit(code=1) from e

    except json.JSONDecodeError as e:
        error_msg = f"Could not {what}: response is not JSON ({e!s})"
        sce_hdl.logger.error(error_msg)  # noqa: TRY400
        raise typer.Exit(code=1) from e

    except PreconditionError as e:
        error_msg = f"Could not {what}: {e!s}"
        sce_hdl.logger.error(error_msg)  # noqa: TRY400
        raise typer.Exit(code=1) from e

    except TransportError as e:
        error_msg = f"Could not {what}: {e!s}"
        sce_hdl.logger.error(error_msg)  # noqa: TRY400
        raise typer.Exit(code=e.exit_code) from e


@register_command("project-status", alias="ps", help="Show queues, container groups and servers of the project")
def sce_project_status(ctx: Context) -> None:
    """Show which container groups serve which queue, and the servers of each group.

    Args:
        ctx: Typer context containing the SCE handler.

    """
    sce_hdl = ctx.obj["sceHdl"]
    with _command_errors(sce_hdl, "get project status"):
        status = collect_project_status(sce_hdl)

    if ctx.obj["context"].dry_run:
        return
    if ctx.obj["context"].json_output:
        typer.echo(json.dumps(status.as_json(), indent=2))
        return
    for line in status.lines():
        typer.echo(line)


@register_command(
    "project-clean",
    help="[bold red]Delete every container group and queue of the project, without confirmation[/bold red]",
)
def sce_project_clean(ctx: Context) -> None:
    """Delete every container group and every queue of the project.

    Args:
        ctx: Typer context containing the SCE handler.

    Raises:
        typer.Exit: With status 1 if any delete failed.

    """
    sce_hdl = ctx.obj["sceHdl"]
    json_output = ctx.obj["context"].json_output
    with _command_errors(sce_hdl, "clean project"):
        report = clean_project(sce_hdl, on_deleted=None if json_output else typer.echo)

    if json_output:
        typer.echo(json.dumps(report.as_json(), indent=2))
    elif not ctx.obj["context"].dry_run:
        typer.echo(report.summary)

    if report.failures:
        error_msg = f"Project clean-up incomplete, {len(report.failures)} delete(s) failed: {'; '.join(report.failures)}"
        sce_hdl.logger.error(error_msg)
        raise typer.Exit(code=1)
