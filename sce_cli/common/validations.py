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

"""Validate input parameters and data for SCE operations.

This module provides validation functions for command arguments, including
resource names, UUIDs, HTTP verbs and request body sources.
"""

import os
import re
import uuid
from pathlib import Path

from click import BadParameter

from .errors import PreconditionError

HTTP_VERBS = ("GET", "POST", "PATCH", "PUT", "DELETE")

_RESOURCE_NAME = re.compile(r"^[a-z][a-z0-9-]{0,61}[a-z0-9]$")


def validate_uuid(value: str | None) -> str | None:
    """Validate and format a UUID string.

    Args:
        value: The UUID string to validate

    Returns:
        The validated UUID string in standard format

    Raises:
        BadParameter: If the input is not a valid UUID

    """
    if value is None:
        return None

    try:
        return str(uuid.UUID(hex=value))

    except ValueError as e:
        error_msg = f"invalid UUID '{value}'"
        raise BadParameter(error_msg) from e


def validate_resource_name(value: str | None) -> str | None:
    """Validate a container group, queue or project name.

    Names are lowercase, start with a letter, end with a letter or digit and
    are between 2 and 63 characters long.

    Args:
        value: The name to validate

    Returns:
        The validated name

    Raises:
        BadParameter: If the name does not follow the naming rules

    """
    if value is None:
        return None

    if not _RESOURCE_NAME.match(value):
        error_msg = f"invalid resource name '{value}'"
        raise BadParameter(error_msg)

    return value


def validate_http_verb(value: str) -> str | None:
    """Normalize an HTTP verb.

    Args:
        value: The verb as typed by the user

    Returns:
        The upper-cased verb, or None if it is not one of the supported verbs

    """
    verb = value.strip().upper()
    return verb if verb in HTTP_VERBS else None


def is_literal_json(source: str) -> bool:
    """Check whether a body source is a literal JSON document rather than a path."""
    return source.lstrip().startswith(("{", "["))


def read_body_source(source: str | None) -> str | None:
    """Resolve a request body from a literal JSON string or a data file.

    Args:
        source: Literal JSON text, a path to a readable file, or None

    Returns:
        The request body text, or None when no source was given

    Raises:
        PreconditionError: If the data file is missing or unreadable

    """
    if source is None:
        return None

    if is_literal_json(source):
        return source

    path = Path(source).expanduser()
    if not path.is_file() or not os.access(path, os.R_OK):
        raise PreconditionError("Data file", path=str(path))

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PreconditionError("Data file", path=str(path)) from e
