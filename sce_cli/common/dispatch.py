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

"""Dispatch commands and render their results.

This module owns the Typer application every command registers on, the global
options callback, the command table with its short aliases, and the rendering
of call results as raw JSON or condensed text.
"""

import json
from collections.abc import Callable
from typing import Annotated, Any, TypeVar

import typer
from typer import Context, Option

from sce_cli.api import SceApi

from .errors import ApiError, PreconditionError, TransportError
from .formatters import Projection, format_result
from .sce_client import CallResult

F = TypeVar("F", bound=Callable[..., Any])

GLOBAL_FLAGS = ("-j", "--json", "-v", "--verbose", "-x", "--trace", "--dry-run")
GLOBAL_VALUE_OPTIONS = (
    "-o",
    "--organization",
    "-p",
    "--project",
    "--config-dir",
    "--cookie-jar",
    "--log-file",
    "--public-url",
    "--portal-url",
    "--node-url",
    "--node-token",
)


def base_callback(  # noqa: PLR0913
    ctx: Context,
    json_output: Annotated[
        bool,
        Option("-j", "--json", help="Print raw JSON instead of condensed text", rich_help_panel="Common"),
    ] = False,
    organization: Annotated[
        str | None,
        Option("-o", "--organization", help="Organization name", rich_help_panel="Common", envvar="SCE_ORGANIZATION_NAME"),
    ] = None,
    project: Annotated[
        str | None,
        Option("-p", "--project", help="Project name", rich_help_panel="Common", envvar="SCE_PROJECT_NAME"),
    ] = None,
    verbose: Annotated[
        bool,
        Option(
            "-v",
            "--verbose",
            help="Echo outgoing calls on stderr, secrets included",
            rich_help_panel="Common",
            envvar="SCE_VERBOSE",
        ),
    ] = False,
    trace: Annotated[
        bool,
        Option("-x", "--trace", help="Enable execution tracing", rich_help_panel="Common"),
    ] = False,
    dry_run: Annotated[
        bool,
        Option("--dry-run", help="Print calls instead of executing them", rich_help_panel="Common", envvar="SCE_DRY_RUN"),
    ] = False,
    config_dir: Annotated[
        str | None,
        Option(help="Configuration directory [default: ~/.config/sce]", rich_help_panel="Config", envvar="SCE_CONFIG_DIR"),
    ] = None,
    cookie_jar: Annotated[
        str | None,
        Option(help="Portal session cookie jar", rich_help_panel="Config", envvar="SCE_COOKIE_JAR"),
    ] = None,
    log_file: Annotated[
        str | None,
        Option(help="Append a trace of every HTTP exchange here", rich_help_panel="Config", envvar="SCE_LOG_FILE"),
    ] = None,
    public_url: Annotated[
        str | None,
        Option(help="The base public API url", rich_help_panel="Config", envvar="SCE_PUBLIC_URL"),
    ] = None,
    portal_url: Annotated[
        str | None,
        Option(help="The base portal API url", rich_help_panel="Config", envvar="SCE_PORTAL_URL"),
    ] = None,
    node_url: Annotated[
        str | None,
        Option(help="The base node API url", rich_help_panel="Config", envvar="SCE_NODE_URL"),
    ] = None,
    node_token: Annotated[
        str | None,
        Option(help="Bearer token for the node API", rich_help_panel="Config", envvar="SCE_NODE_TOKEN"),
    ] = None,
) -> None:
    """Parse the global options and build the handler shared by every command."""
    sce_hdl = SceApi(
        organization=organization,
        project=project,
        json_output=json_output,
        verbose=verbose,
        dry_run=dry_run,
        trace=trace,
        config_dir=config_dir,
        cookie_jar=cookie_jar,
        log_file=log_file,
        public_url=public_url,
        portal_url=portal_url,
        node_url=node_url,
        node_token=node_token,
    )
    sce_hdl.logger.debug("Dispatching '%s' with %s", ctx.invoked_subcommand, sce_hdl.context)
    ctx.obj = {
        "context": sce_hdl.context,
        "options": {
            "organization": organization,
            "project": project,
            "public_url": public_url,
            "portal_url": portal_url,
            "node_url": node_url,
        },
        "sceHdl": sce_hdl,
    }


sce_app = typer.Typer(
    context_settings={
        "max_content_width": 120,
    },
    pretty_exceptions_enable=False,
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
    callback=base_callback,
)

registered_commands: dict[str, dict[str, str | None]] = {}


def register_command(name: str, *, help: str, alias: str | None = None, **kwargs: Any) -> Callable[[F], F]:  # noqa: A002, ANN401
    """Register a command, and its optional short alias, on the application.

    Args:
        name: Canonical command name
        help: Help text
        alias: Optional short alias, hidden from the help listing
        **kwargs: Extra settings forwarded to Typer

    Returns:
        A decorator registering the command function

    """

    def decorator(fn: F) -> F:
        for cmd in (name, alias):
            if cmd is not None and (cmd in registered_commands or cmd in aliases()):
                error_msg = f"command '{cmd}' is already registered"
                raise ValueError(error_msg)
        registered_commands[name] = {"help": help, "alias": alias}
        sce_app.command(name=name, help=help, **kwargs)(fn)
        if alias is not None:
            sce_app.command(name=alias, help=f"Alias for '{name}'", hidden=True, **kwargs)(fn)
        return fn

    return decorator


def aliases() -> dict[str, str]:
    """Get the mapping of short aliases to canonical command names."""
    return {str(v["alias"]): k for k, v in registered_commands.items() if v.get("alias")}


def render_error(result: CallResult) -> None:
    """Print a failed call on stderr: status line, then the body.

    A JSON body is pretty-printed; anything else is printed verbatim.
    """
    typer.echo(f"{result.method} {result.url}: {result.status_line}", err=True)
    if not result.has_body:
        return
    try:
        data = result.json()
    except ValueError:
        typer.echo(result.body, err=True)
    else:
        typer.echo(json.dumps(data, indent=2), err=True)


def expect_success(result: CallResult, what: str) -> CallResult:
    """Return the result when it is successful or a dry run.

    Raises:
        ApiError: If the status is outside the success set

    """
    if result.dry_run or result.is_success:
        return result
    raise ApiError(result, what)


def render(
    ctx: Context,
    result: CallResult,
    projection: Projection,
    *,
    what: str,
    message: str | None = None,
) -> None:
    """Print a call result in the format selected by the command.

    Args:
        ctx: Typer context containing the SCE handler
        result: The call result to print
        projection: Projection used for condensed text output
        what: Short description of the operation, for error messages
        message: Text printed instead of the body in condensed mode

    Raises:
        typer.Exit: If the call failed or its body is not JSON

    """
    sce_hdl = ctx.obj["sceHdl"]
    json_output = ctx.obj["context"].json_output
    if result.dry_run:
        return

    if not result.is_success:
        render_error(result)
        raise typer.Exit(code=1)

    if message is not None and not json_output:
        typer.echo(message)
        return

    try:
        data = result.json()
    except ValueError as e:
        error_msg = f"Could not {what}: response is not JSON [{result.body}]"
        sce_hdl.logger.error(error_msg)  # noqa: TRY400
        raise typer.Exit(code=1) from e

    if data is None:
        typer.echo(result.status_line)
        return

    for line in format_result(data, projection, json_output=json_output):
        typer.echo(line)


def run_command(
    ctx: Context,
    call: Callable[[], CallResult],
    projection: Projection,
    *,
    what: str,
    message: str | None = None,
) -> None:
    """Invoke one API primitive and render its result.

    Args:
        ctx: Typer context containing the SCE handler
        call: Zero-argument callable invoking the primitive
        projection: Projection used for condensed text output
        what: Short description of the operation, for error messages
        message: Text printed instead of the body in condensed mode

    Raises:
        typer.Exit: With status 1 on local or HTTP failures, or with the
            transport exit code when no response was received

    """
    sce_hdl = ctx.obj["sceHdl"]
    try:
        result = call()

    except PreconditionError as e:
        error_msg = f"Could not {what}: {e!s}"
        sce_hdl.logger.error(error_msg)  # noqa: TRY400
        raise typer.Exit(code=1) from e

    except TransportError as e:
        error_msg = f"Could not {what}: {e!s}"
        sce_hdl.logger.error(error_msg)  # noqa: TRY400
        raise typer.Exit(code=e.exit_code) from e

    render(ctx, result, projection, what=what, message=message)
