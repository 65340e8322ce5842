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

"""Manage container groups and the servers running them."""

from typing import Annotated

from typer import Argument, Context

from sce_cli.common.dispatch import register_command, run_command
from sce_cli.common.formatters import CONTAINER_GROUP, CONTAINER_GROUPS, LOG_TOKEN, RAW, SERVERS
from sce_cli.common.validations import read_body_source

ContainerGroupName = Annotated[str, Argument(help="The container group name")]
MachineId = Annotated[str, Argument(help="The machine id of the server")]
DataSource = Annotated[str, Argument(help="Path of a JSON data file, or a literal JSON document")]


@register_command("cg-list", help="List container groups")
def sce_cg_list(ctx: Context) -> None:
    """List container groups: id name status description image queue_name.

    Args:
        ctx: Typer context containing the SCE handler.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, sce_hdl.list_container_groups, CONTAINER_GROUPS, what="list container groups")


@register_command("cg-get", help="Show one container group")
def sce_cg_get(ctx: Context, name: ContainerGroupName) -> None:
    """Show one container group.

    Args:
        ctx: Typer context containing the SCE handler.
        name: The container group name.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(
        ctx,
        lambda: sce_hdl.get_container_group(name),
        CONTAINER_GROUP,
        what=f"get container group '{name}'",
    )


@register_command("cg-create", help="Create a container group from a JSON data file")
def sce_cg_create(ctx: Context, source: DataSource) -> None:
    """Create a container group.

    The data file is checked before any call is made.

    Args:
        ctx: Typer context containing the SCE handler.
        source: JSON data file or literal JSON document.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(
        ctx,
        lambda: sce_hdl.create_container_group(read_body_source(source)),
        CONTAINER_GROUP,
        what="create container group",
    )


@register_command("cg-update", help="Update a container group from a partial JSON data file")
def sce_cg_update(ctx: Context, name: ContainerGroupName, source: DataSource) -> None:
    """Update a container group.

    Args:
        ctx: Typer context containing the SCE handler.
        name: The container group name.
        source: JSON data file or literal JSON document.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(
        ctx,
        lambda: sce_hdl.update_container_group(name, read_body_source(source)),
        CONTAINER_GROUP,
        what=f"update container group '{name}'",
    )


@register_command("cg-delete", help="Delete a container group")
def sce_cg_delete(ctx: Context, name: ContainerGroupName) -> None:
    """Delete a container group.

    Args:
        ctx: Typer context containing the SCE handler.
        name: The container group name.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(
        ctx,
        lambda: sce_hdl.delete_container_group(name),
        RAW,
        what=f"delete container group '{name}'",
        message=f"Container group '{name}' was deleted",
    )


@register_command("cg-start", help="Start a container group")
def sce_cg_start(ctx: Context, name: ContainerGroupName) -> None:
    """Start a container group.

    Args:
        ctx: Typer context containing the SCE handler.
        name: The container group name.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(
        ctx,
        lambda: sce_hdl.start_container_group(name),
        RAW,
        what=f"start container group '{name}'",
        message=f"Container group '{name}' is starting",
    )


@register_command("cg-stop", help="Stop a container group")
def sce_cg_stop(ctx: Context, name: ContainerGroupName) -> None:
    """Stop a container group.

    Args:
        ctx: Typer context containing the SCE handler.
        name: The container group name.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(
        ctx,
        lambda: sce_hdl.stop_container_group(name),
        RAW,
        what=f"stop container group '{name}'",
        message=f"Container group '{name}' is stopping",
    )


@register_command("server-list", alias="srv-list", help="List the servers of a container group")
def sce_server_list(ctx: Context, name: ContainerGroupName) -> None:
    """List servers: machine_id state version update_time.

    Args:
        ctx: Typer context containing the SCE handler.
        name: The container group name.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, lambda: sce_hdl.list_servers(name), SERVERS, what=f"list servers of '{name}'")


def _server_action(ctx: Context, name: str, machine_id: str, action: str) -> None:
    sce_hdl = ctx.obj["sceHdl"]
    run_command(
        ctx,
        lambda: sce_hdl.server_action(name, machine_id, action),
        RAW,
        what=f"{action} server '{machine_id}'",
        message=f"Server '{machine_id}' of '{name}': {action} requested",
    )


@register_command("server-reallocate", alias="srv-reallocate", help="Move a server's workload to another node")
def sce_server_reallocate(ctx: Context, name: ContainerGroupName, machine_id: MachineId) -> None:
    """Reallocate one server of a container group."""
    _server_action(ctx, name, machine_id, "reallocate")


@register_command("server-recreate", alias="srv-recreate", help="Recreate the container on a server")
def sce_server_recreate(ctx: Context, name: ContainerGroupName, machine_id: MachineId) -> None:
    """Recreate one server of a container group."""
    _server_action(ctx, name, machine_id, "recreate")


@register_command("server-restart", alias="srv-restart", help="Restart the container on a server")
def sce_server_restart(ctx: Context, name: ContainerGroupName, machine_id: MachineId) -> None:
    """Restart one server of a container group."""
    _server_action(ctx, name, machine_id, "restart")


@register_command("log-token", help="Generate a token for the log service")
def sce_log_token(ctx: Context) -> None:
    """Generate a log service token through the portal session.

    Args:
        ctx: Typer context containing the SCE handler.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, sce_hdl.generate_log_token, LOG_TOKEN, what="generate log token")
