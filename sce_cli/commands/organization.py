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

"""Manage projects and organization-wide resources."""

import json
from typing import Annotated

from typer import Argument, Context, Option

from sce_cli.common.dispatch import register_command, run_command
from sce_cli.common.formatters import GPU_CLASSES, PROJECT, PROJECTS, RAW, WEBHOOK_SECRET
from sce_cli.common.validations import validate_resource_name


@register_command("project-list", help="List the projects of the organization")
def sce_project_list(ctx: Context) -> None:
    """List projects: id name display_name create_time.

    Args:
        ctx: Typer context containing the SCE handler.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, sce_hdl.list_projects, PROJECTS, what="list projects")


@register_command("project-get", help="Show one project")
def sce_project_get(
    ctx: Context,
    name: Annotated[str, Argument(help="The project name")],
) -> None:
    """Show one project.

    Args:
        ctx: Typer context containing the SCE handler.
        name: The project name.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, lambda: sce_hdl.get_project(name), PROJECT, what=f"get project '{name}'")


@register_command("project-create", help="Create a project")
def sce_project_create(
    ctx: Context,
    name: Annotated[str, Argument(help="The project name", callback=validate_resource_name)],
    display_name: Annotated[
        str | None,
        Option(help="Human readable name [default: the project name]", rich_help_panel="Create"),
    ] = None,
) -> None:
    """Create a project.

    Args:
        ctx: Typer context containing the SCE handler.
        name: The project name.
        display_name: Human readable name.

    """
    sce_hdl = ctx.obj["sceHdl"]
    body = json.dumps({"name": name, "display_name": display_name or name})
    run_command(ctx, lambda: sce_hdl.create_project(body), PROJECT, what=f"create project '{name}'")


@register_command("project-delete", help="Delete a project")
def sce_project_delete(
    ctx: Context,
    name: Annotated[str, Argument(help="The project name")],
) -> None:
    """Delete a project.

    Args:
        ctx: Typer context containing the SCE handler.
        name: The project name.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(
        ctx,
        lambda: sce_hdl.delete_project(name),
        RAW,
        what=f"delete project '{name}'",
        message=f"Project '{name}' was deleted",
    )


@register_command("gpu-list", help="List the GPU classes available to the organization")
def sce_gpu_list(ctx: Context) -> None:
    """List GPU classes: id name is_high_demand.

    Args:
        ctx: Typer context containing the SCE handler.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, sce_hdl.list_gpu_classes, GPU_CLASSES, what="list GPU classes")


@register_command("quota-get", help="Show the organization quotas")
def sce_quota_get(ctx: Context) -> None:
    """Show the organization quotas as JSON.

    Args:
        ctx: Typer context containing the SCE handler.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, sce_hdl.get_quotas, RAW, what="get quotas")


@register_command("webhook-secret-get", help="Show the webhook signing secret")
def sce_webhook_secret_get(ctx: Context) -> None:
    """Show the webhook signing secret of the organization.

    Args:
        ctx: Typer context containing the SCE handler.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, sce_hdl.get_webhook_secret, WEBHOOK_SECRET, what="get webhook secret")
