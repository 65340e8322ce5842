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

"""Select and apply the output format of a command."""

import json
from typing import Any

import attrs

from .records import (
    ContainerGroup,
    GpuClass,
    Job,
    LogToken,
    Node,
    Organization,
    Project,
    Queue,
    Record,
    Server,
    User,
    WebhookSecret,
)


@attrs.frozen
class Projection:
    """How a response body is condensed into text lines.

    A projection with an ``items_key`` expects a list response and yields one
    line per element; without one it yields one line for the whole object.
    A projection without a record type always prints the decoded JSON.
    """

    record: type[Record] | None
    items_key: str | None = None

    @property
    def is_list(self) -> bool:
        """Check if the projection applies to a list response."""
        return self.items_key is not None


RAW = Projection(None)
CONTAINER_GROUPS = Projection(ContainerGroup, "items")
CONTAINER_GROUP = Projection(ContainerGroup)
SERVERS = Projection(Server, "instances")
QUEUES = Projection(Queue, "items")
QUEUE = Projection(Queue)
JOBS = Projection(Job, "items")
JOB = Projection(Job)
PROJECTS = Projection(Project, "items")
PROJECT = Projection(Project)
ORGANIZATIONS = Projection(Organization, "items")
GPU_CLASSES = Projection(GpuClass, "items")
NODES = Projection(Node, "items")
NODE = Projection(Node)
USER = Projection(User)
WEBHOOK_SECRET = Projection(WebhookSecret)
LOG_TOKEN = Projection(LogToken)


def list_items(data: Any, items_key: str) -> list[Any]:  # noqa: ANN401
    """Extract the array of a list response.

    Args:
        data: Decoded response body
        items_key: Key of the array in an object response

    Returns:
        The array elements; a bare array is accepted as-is

    """
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        items = data.get(items_key)
        if isinstance(items, list):
            return items
    return []


def format_result(data: Any, projection: Projection, *, json_output: bool) -> list[str]:  # noqa: ANN401
    """Format a decoded response body as output lines.

    Args:
        data: Decoded response body
        projection: Projection selected by the command
        json_output: Emit JSON values instead of condensed text

    Returns:
        Lines to print, without trailing newlines

    """
    if projection.items_key is not None:
        items = list_items(data, projection.items_key)
        if json_output or projection.record is None:
            return [json.dumps(item) for item in items]
        return [projection.record.from_json(item).as_line() for item in items]

    if json_output or projection.record is None:
        return [json.dumps(data, indent=2)]
    return [projection.record.from_json(data).as_line()]
