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

"""Manage job queues and their jobs."""

from typing import Annotated

from typer import Argument, Context

from sce_cli.common.dispatch import register_command, run_command
from sce_cli.common.formatters import JOB, JOBS, QUEUE, QUEUES, RAW
from sce_cli.common.validations import read_body_source, validate_uuid

QueueName = Annotated[str, Argument(help="The queue name")]
JobId = Annotated[str, Argument(help="The job id", callback=validate_uuid)]
DataSource = Annotated[str, Argument(help="Path of a JSON data file, or a literal JSON document")]


@register_command("queue-list", alias="q-list", help="List queues")
def sce_queue_list(ctx: Context) -> None:
    """List queues: id name display_name create_time.

    Args:
        ctx: Typer context containing the SCE handler.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, sce_hdl.list_queues, QUEUES, what="list queues")


@register_command("queue-get", alias="q-get", help="Show one queue")
def sce_queue_get(ctx: Context, name: QueueName) -> None:
    """Show one queue.

    Args:
        ctx: Typer context containing the SCE handler.
        name: The queue name.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, lambda: sce_hdl.get_queue(name), QUEUE, what=f"get queue '{name}'")


@register_command("queue-create", alias="q-create", help="Create a queue from a JSON data file")
def sce_queue_create(ctx: Context, source: DataSource) -> None:
    """Create a queue.

    Args:
        ctx: Typer context containing the SCE handler.
        source: JSON data file or literal JSON document.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, lambda: sce_hdl.create_queue(read_body_source(source)), QUEUE, what="create queue")


@register_command("queue-update", alias="q-update", help="Update a queue from a partial JSON data file")
def sce_queue_update(ctx: Context, name: QueueName, source: DataSource) -> None:
    """Update a queue.

    Args:
        ctx: Typer context containing the SCE handler.
        name: The queue name.
        source: JSON data file or literal JSON document.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(
        ctx,
        lambda: sce_hdl.update_queue(name, read_body_source(source)),
        QUEUE,
        what=f"update queue '{name}'",
    )


@register_command("queue-delete", alias="q-delete", help="Delete a queue")
def sce_queue_delete(ctx: Context, name: QueueName) -> None:
    """Delete a queue.

    Args:
        ctx: Typer context containing the SCE handler.
        name: The queue name.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(
        ctx,
        lambda: sce_hdl.delete_queue(name),
        RAW,
        what=f"delete queue '{name}'",
        message=f"Queue '{name}' was deleted",
    )


@register_command("job-list", alias="j-list", help="List the jobs of a queue")
def sce_job_list(ctx: Context, queue: QueueName) -> None:
    """List jobs: id status create_time update_time.

    Args:
        ctx: Typer context containing the SCE handler.
        queue: The queue name.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, lambda: sce_hdl.list_jobs(queue), JOBS, what=f"list jobs of '{queue}'")


@register_command("job-get", alias="j-get", help="Show one job")
def sce_job_get(ctx: Context, queue: QueueName, job_id: JobId) -> None:
    """Show one job.

    Args:
        ctx: Typer context containing the SCE handler.
        queue: The queue name.
        job_id: The job id.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(ctx, lambda: sce_hdl.get_job(queue, job_id), JOB, what=f"get job '{job_id}'")


@register_command("job-create", alias="j-create", help="Submit a job from a JSON data file")
def sce_job_create(ctx: Context, queue: QueueName, source: DataSource) -> None:
    """Submit a job to a queue.

    Args:
        ctx: Typer context containing the SCE handler.
        queue: The queue name.
        source: JSON data file or literal JSON document.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(
        ctx,
        lambda: sce_hdl.create_job(queue, read_body_source(source)),
        JOB,
        what=f"create job in '{queue}'",
    )


@register_command("job-delete", alias="j-delete", help="Cancel and delete a job")
def sce_job_delete(ctx: Context, queue: QueueName, job_id: JobId) -> None:
    """Cancel and delete a job.

    Args:
        ctx: Typer context containing the SCE handler.
        queue: The queue name.
        job_id: The job id.

    """
    sce_hdl = ctx.obj["sceHdl"]
    run_command(
        ctx,
        lambda: sce_hdl.delete_job(queue, job_id),
        RAW,
        what=f"delete job '{job_id}'",
        message=f"Job '{job_id}' was deleted",
    )
