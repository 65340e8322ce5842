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

"""Record types decoded from SCE API responses.

Each record keeps only the fields shown in condensed text output, in display
order. ``PATHS`` maps every field to its location in the JSON object.
"""

from __future__ import annotations

from typing import Any, ClassVar, TypeVar

import attrs

MISSING = "-"

R = TypeVar("R", bound="Record")


def dig(data: Any, *keys: str) -> str:  # noqa: ANN401
    """Walk nested objects and return the leaf as display text.

    Args:
        data: Decoded JSON value
        *keys: Object keys to follow

    Returns:
        The leaf value as a single-line string, or ``-`` when it is absent or blank

    """
    for key in keys:
        if not isinstance(data, dict):
            return MISSING
        data = data.get(key)
    if data is None:
        return MISSING
    if isinstance(data, bool):
        return str(data).lower()
    # one record per output line
    return " ".join(str(data).split()) or MISSING


class Record:
    """Base class for records projected from JSON objects."""

    PATHS: ClassVar[dict[str, tuple[str, ...]]] = {}

    @classmethod
    def from_json(cls: type[R], data: Any) -> R:  # noqa: ANN401
        """Build a record from a decoded JSON object."""
        return cls(**{name: dig(data, *path) for name, path in cls.PATHS.items()})

    def columns(self) -> list[str]:
        """Get the field values in display order."""
        return [getattr(self, f.name) for f in attrs.fields(type(self))]

    def as_line(self) -> str:
        """Render the record as one space-separated line."""
        return " ".join(self.columns())


@attrs.frozen
class ContainerGroup(Record):
    """A container group and the queue it is connected to."""

    PATHS: ClassVar[dict[str, tuple[str, ...]]] = {
        "id": ("id",),
        "name": ("name",),
        "status": ("current_state", "status"),
        "description": ("current_state", "description"),
        "image": ("container", "image"),
        "queue_name": ("queue_connection", "queue_name"),
    }

    id: str
    name: str
    status: str
    description: str
    image: str
    queue_name: str


@attrs.frozen
class Server(Record):
    """A server instance running a container group's workload."""

    PATHS: ClassVar[dict[str, tuple[str, ...]]] = {
        "machine_id": ("machine_id",),
        "state": ("state",),
        "version": ("version",),
        "update_time": ("update_time",),
    }

    machine_id: str
    state: str
    version: str
    update_time: str


@attrs.frozen
class Queue(Record):
    """A job queue."""

    PATHS: ClassVar[dict[str, tuple[str, ...]]] = {
        "id": ("id",),
        "name": ("name",),
        "display_name": ("display_name",),
        "create_time": ("create_time",),
    }

    id: str
    name: str
    display_name: str
    create_time: str


@attrs.frozen
class Job(Record):
    """A job submitted to a queue."""

    PATHS: ClassVar[dict[str, tuple[str, ...]]] = {
        "id": ("id",),
        "status": ("status",),
        "create_time": ("create_time",),
        "update_time": ("update_time",),
    }

    id: str
    status: str
    create_time: str
    update_time: str


@attrs.frozen
class Project(Record):
    """A project inside an organization."""

    PATHS: ClassVar[dict[str, tuple[str, ...]]] = {
        "id": ("id",),
        "name": ("name",),
        "display_name": ("display_name",),
        "create_time": ("create_time",),
    }

    id: str
    name: str
    display_name: str
    create_time: str


@attrs.frozen
class Organization(Record):
    """An organization the logged-in user belongs to."""

    PATHS: ClassVar[dict[str, tuple[str, ...]]] = {
        "id": ("id",),
        "name": ("name",),
        "display_name": ("display_name",),
    }

    id: str
    name: str
    display_name: str


@attrs.frozen
class GpuClass(Record):
    """A GPU class available to the organization."""

    PATHS: ClassVar[dict[str, tuple[str, ...]]] = {
        "id": ("id",),
        "name": ("name",),
        "is_high_demand": ("is_high_demand",),
    }

    id: str
    name: str
    is_high_demand: str


@attrs.frozen
class Node(Record):
    """A compute node as seen by the privileged node API."""

    PATHS: ClassVar[dict[str, tuple[str, ...]]] = {
        "id": ("id",),
        "name": ("name",),
        "state": ("state",),
        "gpu_class": ("gpu_class",),
    }

    id: str
    name: str
    state: str
    gpu_class: str


@attrs.frozen
class User(Record):
    """The user owning the portal session."""

    PATHS: ClassVar[dict[str, tuple[str, ...]]] = {
        "id": ("id",),
        "username": ("username",),
        "email": ("email",),
    }

    id: str
    username: str
    email: str


@attrs.frozen
class WebhookSecret(Record):
    """The organization's webhook signing secret."""

    PATHS: ClassVar[dict[str, tuple[str, ...]]] = {"secret_key": ("secret_key",)}

    secret_key: str


@attrs.frozen
class LogToken(Record):
    """A short-lived token for the log service."""

    PATHS: ClassVar[dict[str, tuple[str, ...]]] = {"token": ("token",)}

    token: str
