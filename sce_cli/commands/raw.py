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

"""Send arbitrary requests to the SCE APIs."""

from typing import Annotated

import typer
from typer import Argument, Context, Option

from sce_cli.common.dispatch import register_command, run_command
from sce_cli.common.formatters import RAW
from sce_cli.common.validations import HTTP_VERBS, read_body_source, validate_http_verb

INVALID_VERB_EXIT_CODE = 10


@register_command("curl", help="Send a raw request to the public (or portal) API and print the JSON response")
def sce_curl(
    ctx: Context,
    verb: Annotated[str, Argument(help=f"HTTP verb, one of {', '.join(HTTP_VERBS)}")],
    path: Annotated[str, Argument(help="Path below the API base url, or an absolute url")],
    data: Annotated[
        str | None,
        Option("--data", "-d", help="Path of a JSON data file, or a literal JSON document", rich_help_panel="Request"),
    ] = None,
    portal: Annotated[
        bool,
        Option("--portal", help="Send to the portal API with the session cookie", rich_help_panel="Request"),
    ] = False,
) -> None:
    """Send a raw request.

    Args:
        ctx: Typer context containing the SCE handler.
        verb: HTTP verb.
        path: Path below the API base url.
        data: Optional request body source.
        portal: Use the portal API instead of the public API.

    Raises:
        typer.Exit: With status 10 if the verb is not supported.

    """
    sce_hdl = ctx.obj["sceHdl"]
    method = validate_http_verb(verb)
    if method is None:
        error_msg = f"Invalid HTTP verb '{verb}', expected one of {', '.join(HTTP_VERBS)}"
        sce_hdl.logger.error(error_msg)
        raise typer.Exit(code=INVALID_VERB_EXIT_CODE)

    run_command(
        ctx,
        lambda: sce_hdl.raw(method, path, read_body_source(data), portal=portal),
        RAW,
        what=f"{method} {path}",
    )
