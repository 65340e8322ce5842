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

"""One primitive per SCE resource operation.

Every primitive composes the resource path from the organization, project and
resource identifiers, picks the HTTP verb and hands any request body through
unchanged. Primitives return the raw ``CallResult``; interpreting the body is
left to the dispatcher.
"""

import json
from typing import Any
from urllib.parse import quote as q

from sce_cli.common.errors import PreconditionError
from sce_cli.common.sce_base import SceBase
from sce_cli.common.sce_client import CallResult, SceClient

SERVER_ACTIONS = ("reallocate", "recreate", "restart")


def _seg(value: str) -> str:
    return q(value, safe="")


class SceApi(SceBase):
    """Handler exposing the SCE API primitives.

    Holds one client per API: the public API authenticated with the API key,
    the portal API authenticated with the session cookie jar, and the node API
    authenticated with a bearer token. Clients are created on first use so that
    commands which never touch an API do not need its credential.
    """

    def __init__(self, **kwargs: Any) -> None:  # noqa: ANN401
        """Initialize the SceApi handler.

        Args:
            **kwargs: Settings forwarded to SceBase

        """
        super().__init__(**kwargs)
        self._public_api_hdl: SceClient | None = None
        self._portal_api_hdl: SceClient | None = None
        self._node_api_hdl: SceClient | None = None
        self.cookie_jar = self.load_cookie_jar()

    def _client(self, name: str, url: str, headers: dict[str, str], *, with_cookies: bool = False) -> SceClient:
        return SceClient(
            self.logger.getChild(name),
            url,
            headers=headers,
            cookies=self.cookie_jar if with_cookies else None,
            cookie_file=str(self.cookie_jar_path) if with_cookies else None,
            verbose=self.context.verbose,
            dry_run=self.context.dry_run,
            log_file=self.log_file,
        )

    @property
    def public_api_hdl(self) -> SceClient:
        """Get the client for the public API."""
        if self._public_api_hdl is None:
            key = self.load_api_key() if self.context.dry_run else self.require_api_key()
            headers = {"Salad-Api-Key": key} if key else {}
            self._public_api_hdl = self._client("publicApiHdl", self.public_url, headers)
        return self._public_api_hdl

    @property
    def portal_api_hdl(self) -> SceClient:
        """Get the client for the portal API."""
        if self._portal_api_hdl is None:
            self._portal_api_hdl = self._client("portalApiHdl", self.portal_url, {}, with_cookies=True)
        return self._portal_api_hdl

    @property
    def node_api_hdl(self) -> SceClient:
        """Get the client for the privileged node API."""
        if self._node_api_hdl is None:
            if not self.node_token and not self.context.dry_run:
                error_msg = "missing node API token (pass --node-token or set SCE_NODE_TOKEN)"
                raise PreconditionError(error_msg)
            headers = {"Authorization": f"Bearer {self.node_token}"} if self.node_token else {}
            self._node_api_hdl = self._client("nodeApiHdl", self.node_url, headers)
        return self._node_api_hdl

    def _org_path(self) -> str:
        return f"/organizations/{_seg(self.require_organization())}"

    def _project_path(self) -> str:
        return f"{self._org_path()}/projects/{_seg(self.require_project())}"

    def _container_path(self, name: str) -> str:
        return f"{self._project_path()}/containers/{_seg(name)}"

    def _queue_path(self, name: str) -> str:
        return f"{self._project_path()}/queues/{_seg(name)}"

    # Organization and project

    def list_projects(self) -> CallResult:
        """List the projects of the organization."""
        return self.public_api_hdl.get(f"{self._org_path()}/projects")

    def get_project(self, name: str) -> CallResult:
        """Get one project."""
        return self.public_api_hdl.get(f"{self._org_path()}/projects/{_seg(name)}")

    def create_project(self, body: str) -> CallResult:
        """Create a project."""
        return self.public_api_hdl.post(f"{self._org_path()}/projects", data=body)

    def delete_project(self, name: str) -> CallResult:
        """Delete a project."""
        return self.public_api_hdl.delete(f"{self._org_path()}/projects/{_seg(name)}")

    def list_gpu_classes(self) -> CallResult:
        """List the GPU classes available to the organization."""
        return self.public_api_hdl.get(f"{self._org_path()}/gpu-classes")

    def get_quotas(self) -> CallResult:
        """Get the organization quotas."""
        return self.public_api_hdl.get(f"{self._org_path()}/quotas")

    def get_webhook_secret(self) -> CallResult:
        """Get the webhook signing secret of the organization."""
        return self.public_api_hdl.get(f"{self._org_path()}/webhook-secret-key")

    # Container groups and their servers

    def list_container_groups(self) -> CallResult:
        """List the container groups of the project."""
        return self.public_api_hdl.get(f"{self._project_path()}/containers")

    def get_container_group(self, name: str) -> CallResult:
        """Get one container group."""
        return self.public_api_hdl.get(self._container_path(name))

    def create_container_group(self, body: str) -> CallResult:
        """Create a container group from a JSON document."""
        return self.public_api_hdl.post(f"{self._project_path()}/containers", data=body)

    def update_container_group(self, name: str, body: str) -> CallResult:
        """Update a container group with a partial JSON document."""
        return self.public_api_hdl.patch(self._container_path(name), data=body)

    def delete_container_group(self, name: str) -> CallResult:
        """Delete a container group."""
        return self.public_api_hdl.delete(self._container_path(name))

    def start_container_group(self, name: str) -> CallResult:
        """Start a container group."""
        return self.public_api_hdl.post(f"{self._container_path(name)}/start")

    def stop_container_group(self, name: str) -> CallResult:
        """Stop a container group."""
        return self.public_api_hdl.post(f"{self._container_path(name)}/stop")

    def list_servers(self, container_group: str) -> CallResult:
        """List the server instances of a container group."""
        return self.public_api_hdl.get(f"{self._container_path(container_group)}/instances")

    def server_action(self, container_group: str, machine_id: str, action: str) -> CallResult:
        """Reallocate, recreate or restart one server instance.

        Raises:
            ValueError: If the action is not a known server action

        """
        if action not in SERVER_ACTIONS:
            error_msg = f"unknown server action '{action}'"
            raise ValueError(error_msg)
        path = f"{self._container_path(container_group)}/instances/{_seg(machine_id)}/{action}"
        return self.public_api_hdl.post(path)

    # Queues and jobs

    def list_queues(self) -> CallResult:
        """List the queues of the project."""
        return self.public_api_hdl.get(f"{self._project_path()}/queues")

    def get_queue(self, name: str) -> CallResult:
        """Get one queue."""
        return self.public_api_hdl.get(self._queue_path(name))

    def create_queue(self, body: str) -> CallResult:
        """Create a queue from a JSON document."""
        return self.public_api_hdl.post(f"{self._project_path()}/queues", data=body)

    def update_queue(self, name: str, body: str) -> CallResult:
        """Update a queue with a partial JSON document."""
        return self.public_api_hdl.patch(self._queue_path(name), data=body)

    def delete_queue(self, name: str) -> CallResult:
        """Delete a queue."""
        return self.public_api_hdl.delete(self._queue_path(name))

    def list_jobs(self, queue: str) -> CallResult:
        """List the jobs of a queue."""
        return self.public_api_hdl.get(f"{self._queue_path(queue)}/jobs")

    def get_job(self, queue: str, job_id: str) -> CallResult:
        """Get one job."""
        return self.public_api_hdl.get(f"{self._queue_path(queue)}/jobs/{_seg(job_id)}")

    def create_job(self, queue: str, body: str) -> CallResult:
        """Submit a job to a queue."""
        return self.public_api_hdl.post(f"{self._queue_path(queue)}/jobs", data=body)

    def delete_job(self, queue: str, job_id: str) -> CallResult:
        """Cancel and delete a job."""
        return self.public_api_hdl.delete(f"{self._queue_path(queue)}/jobs/{_seg(job_id)}")

    # Portal session

    def login(self, email: str, password: str) -> CallResult:
        """Open a portal session and persist its cookies.

        A dry run prints the request body, so the password is replaced by a
        placeholder there.
        """
        if self.context.dry_run:
            password = "[REDACTED]"  # noqa: S105
        body = json.dumps({"email": email, "password": password})
        result = self.portal_api_hdl.post("/users/login", data=body)
        if result.is_success:
            self.save_cookies()
        return result

    def logout(self) -> CallResult:
        """Close the portal session and forget its cookies."""
        result = self.portal_api_hdl.post("/users/logout")
        if not result.dry_run:
            self.cookie_jar.clear()
            self.cookie_jar_path.unlink(missing_ok=True)
        return result

    def save_cookies(self) -> None:
        """Write the portal session cookies to the cookie jar file."""
        self.cookie_jar_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        self.cookie_jar.save(ignore_discard=True, ignore_expires=True)
        self.cookie_jar_path.chmod(0o600)

    def whoami(self) -> CallResult:
        """Get the user owning the portal session."""
        return self.portal_api_hdl.get("/users/me")

    def list_organizations(self) -> CallResult:
        """List the organizations of the logged-in user."""
        return self.portal_api_hdl.get("/organizations")

    def generate_log_token(self) -> CallResult:
        """Generate a token for the log service."""
        return self.portal_api_hdl.post(f"{self._org_path()}/log-token")

    # Nodes

    def list_nodes(self) -> CallResult:
        """List compute nodes."""
        return self.node_api_hdl.get("/nodes")

    def get_node(self, node_id: str) -> CallResult:
        """Get one compute node."""
        return self.node_api_hdl.get(f"/nodes/{_seg(node_id)}")

    # Passthrough

    def raw(self, method: str, path: str, data: str | None = None, *, portal: bool = False) -> CallResult:
        """Send an arbitrary request to the public or portal API."""
        client = self.portal_api_hdl if portal else self.public_api_hdl
        return client.request(method, path, data=data)
