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

"""Manage the portal session and the client configuration."""

from typing import Annotated

import typer
from rich.pretty import pprint
from typer import Context, Option

from sce_cli.common.dispatch import register_command, run_command
from sce_cli.common.formatters import ORGANIZATIONS, RAW, USER


@register_command("login", help="Log in to the portal and store the session cookie")
def sce_login(
    ctx: Context,
    email: Annotated[
        str,
        Option(help="Account e-mail address", rich_help_panel="Login", envvar="SCE_EMAIL", prompt=True),
    ],
    password: Annotated[
        str,
        Option(help="Account password", rich_help_panel="Login", envvar="SCE_PASSWORD", prompt=True, hide_input=True),
    ],
) -> None:
    """Open a portal session; the cookies are saved to the cookie jar.

    Args:
        ctx: Typer context containing the SCE handler.
        email: Account e-mail address.
        password: Account password.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(
        ctx,
        lambda: sce_hdl.login(email=email, password=password),
        RAW,
        what="log in",
        message=f"Logged in as {email}",
    )


@register_command("logout", help="Log out of the portal and clear the session cookie")
def sce_logout(ctx: Context) -> None:
    """Close the portal session.

    Args:
        ctx: Typer context containing the SCE handler.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, sce_hdl.logout, RAW, what="log out", message="Logged out")


@register_command("whoami", help="Show the user owning the portal session")
def sce_whoami(ctx: Context) -> None:
    """Show the logged-in user: id username email.

    Args:
        ctx: Typer context containing the SCE handler.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, sce_hdl.whoami, USER, what="get user")


@register_command("org-list", help="List the organizations of the logged-in user")
def sce_org_list(ctx: Context) -> None:
    """List organizations: id name display_name.

    Args:
        ctx: Typer context containing the SCE handler.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, sce_hdl.list_organizations, ORGANIZATIONS, what="list organizations")


@register_command("config-get", help="Show the effective configuration")
def sce_config_get(ctx: Context) -> None:
    """Show the effective configuration, with the API key redacted.

    Args:
        ctx: Typer context containing the SCE handler.

    """
    sce_hdl = ctx.obj["sceHdl"]
    context = ctx.obj["context"]
    resp = {
        "organization": context.organization,
        "project": context.project,
        "public_url": sce_hdl.public_url,
        "portal_url": sce_hdl.portal_url,
        "node_url": sce_hdl.node_url,
        "config_dir": str(sce_hdl.cfgdir),
        "cookie_jar": str(sce_hdl.cookie_jar_path),
        "apikey": "[REDACTED]" if sce_hdl.load_api_key() else None,
    }
    pprint(resp, expand_all=True)


@register_command(
    "config-set",
    help="""Save defaults to config.yaml. Pass the values as global options, e.g.
            'sce config-set -o my-org -p my-project --public-url https://...'""",
)
def sce_config_set(ctx: Context) -> None:
    """Save the organization, project and API urls given on the command line.

    Args:
        ctx: Typer context containing the SCE handler.

    Raises:
        typer.Exit: If nothing was given or the file cannot be written.

    """
    sce_hdl = ctx.obj["sceHdl"]
    values = {k: v for k, v in ctx.obj["options"].items() if v is not None}
    if not values:
        sce_hdl.logger.error("Nothing to set, pass '-o', '-p', '--public-url', '--portal-url' or '--node-url'")
        raise typer.Exit(code=1)

    try:
        resp = sce_hdl.save_config(**values)
    except OSError as e:
        error_msg = f"Could not save configuration: {e!s}"
        sce_hdl.logger.error(error_msg)  # noqa: TRY400
        raise typer.Exit(code=1) from e

    pprint(resp, expand_all=True)
