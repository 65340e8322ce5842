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

"""Provide common utilities for SCE functionality."""

from .errors import ApiError, PreconditionError, SceError, TransportError
from .sce_base import RequestContext, SceBase
from .sce_client import SUCCESS_STATUSES, CallResult, SceClient
from .validations import read_body_source, validate_http_verb, validate_resource_name, validate_uuid

__all__ = [
    "SUCCESS_STATUSES",
    "ApiError",
    "CallResult",
    "PreconditionError",
    "RequestContext",
    "SceBase",
    "SceClient",
    "SceError",
    "TransportError",
    "read_body_source",
    "validate_http_verb",
    "validate_resource_name",
    "validate_uuid",
]
