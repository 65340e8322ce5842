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

"""Handle and manage error conditions in SCE operations.

This module defines the exception classes raised by the transport adapter,
the API primitives and the command dispatcher.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, overload

if TYPE_CHECKING:
    from .sce_client import CallResult


class SceError(Exception):
    """Base class for every error raised by the SCE client."""


class TransportError(SceError):
    """Exception raised when a request never produced an HTTP response.

    The exit code mirrors the one curl reports for the same failure, so that
    scripts wrapping the client see the same statuses.
    """

    def __init__(self, message: str, exit_code: int = 1) -> None:
        """Initialize the TransportError exception.

        Args:
            message: Description of the connection-level failure
            exit_code: Process exit code to terminate with

        """
        super().__init__(message)
        self.exit_code = exit_code


class PreconditionError(SceError):
    """Exception raised when a local precondition fails before any call is made.

    This exception can be initialized in two ways:
    1. With a direct error message
    2. With an object kind and identifier
    """

    @overload
    def __init__(self, _message: str) -> None: ...

    @overload
    def __init__(self, _obj_kind: str, **kwargs: str) -> None: ...

    def __init__(self, *args: str, **kwargs: str) -> None:
        """Initialize the PreconditionError exception.

        Args:
            *args: Positional arguments. If only one is provided, it's treated as a direct message.
            **kwargs: Keyword arguments. If provided, should contain exactly one key-value pair
                     representing the identifier type and value.

        """
        if not kwargs:
            super().__init__(next(iter([*args, "precondition failed"])))

        elif len(kwargs) == 1:
            id_kind, obj_id = next(iter(kwargs.items()))
            error_msg = f"{args[0]} with {id_kind} '{obj_id}' does not exist or is not readable"
            super().__init__(error_msg)

        else:
            error_msg = f"Expected 0 or 1 keyword arguments, got {len(kwargs)}"
            raise ValueError(error_msg)


class ApiError(SceError):
    """Exception raised when the remote API answered outside the success set."""

    def __init__(self, result: CallResult, what: str) -> None:
        """Initialize the ApiError exception.

        Args:
            result: The failing call result
            what: Short description of the attempted operation

        """
        super().__init__(f"{what} failed: {result.status_line}")
        self.result = result
