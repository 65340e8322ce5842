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
"""sce CLI top-level entrypoint."""

import re
import sys

from sce_cli import commands
from sce_cli.common.dispatch import GLOBAL_FLAGS, GLOBAL_VALUE_OPTIONS, sce_app

__all__ = ["commands", "hoist_global_options", "main", "sce_app"]

_SHORT_FLAG_CLUSTER = re.compile(r"^-[jvx]+$")
_SHORT_OPTION_WITH_VALUE = re.compile(r"^-[op].+$")


def hoist_global_options(argv: list[str]) -> list[str]:
    """Move global options in front of the command name.

    Global options are accepted anywhere on the command line; Click only
    accepts them before the command, so they are moved there. Everything after
    ``--`` is left in place.

    Args:
        argv: Command line arguments, without the program name

    Returns:
        The reordered arguments

    """
    head: list[str] = []
    tail: list[str] = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        name = arg.split("=", 1)[0]
        if arg == "--":
            tail.extend(argv[i:])
            break
        if name in GLOBAL_FLAGS or _SHORT_FLAG_CLUSTER.match(arg) or _SHORT_OPTION_WITH_VALUE.match(arg):
            head.append(arg)
        elif name in GLOBAL_VALUE_OPTIONS:
            head.append(arg)
            if "=" not in arg and i + 1 < len(argv):
                i += 1
                head.append(argv[i])
        else:
            tail.append(arg)
        i += 1
    return head + tail


def main(argv: list[str] | None = None) -> None:
    """Run the sce command line."""
    args = sys.argv[1:] if argv is None else argv
    sce_app(args=hoist_global_options(args), prog_name="sce")


if __name__ == "__main__":
    main()
