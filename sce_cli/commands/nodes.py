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

"""Query compute nodes through the privileged node API."""

from typing import Annotated

from typer import Argument, Context

from sce_cli.common.dispatch import register_command, run_command
from sce_cli.common.formatters import NODE, NODES


@register_command("node-list", help="List compute nodes (requires a node API token)")
def sce_node_list(ctx: Context) -> None:
    """List nodes: id name state gpu_class.

    Args:
        ctx: Typer context containing the SCE handler.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, sce_hdl.list_nodes, NODES, what="list nodes")


@register_command("node-get", help="Show one compute node (requires a node API token)")
def sce_node_get(
    ctx: Context,
    node_id: Annotated[str, Argument(help="The node id")],
) -> None:
    """Show one node.

    Args:
        ctx: Typer context containing the SCE handler.
        node_id: The node id.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, lambda: sce_hdl.get_node(node_id), NODE, what=f"get node '{node_id}'")
