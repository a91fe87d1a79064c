# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""lernakit: lerna monorepo synthesis for projen-style projects.

A root :class:`~lernakit.lerna.LernaProject` owns member packages and,
at synthesis time, rewrites its lifecycle tasks so each one fans out
with ``lerna run``, writes ``lerna.json`` (or workspace manifests) and
optionally aggregates member docs.
"""

from lernakit.commands import CommandBuilder
from lernakit.config import LernaOptions, SubprojectConfig, TaskCustomization, load_config
from lernakit.errors import E, ErrorCode, LernaKitError, LernaKitWarning
from lernakit.lerna import LernaProject, NodeRoot, TypeScriptRoot, build_workspace
from lernakit.nx import (
    NxProjectDependency,
    NxTaskDependency,
    add_nx_dependency,
    add_nx_project_dependency,
    add_nx_task_dependency,
)
from lernakit.project import PackageManager, Project, ProjectKind, Task

__version__ = '0.1.0'

__all__ = [
    'CommandBuilder',
    'E',
    'ErrorCode',
    'LernaKitError',
    'LernaKitWarning',
    'LernaOptions',
    'LernaProject',
    'NodeRoot',
    'NxProjectDependency',
    'NxTaskDependency',
    'PackageManager',
    'Project',
    'ProjectKind',
    'SubprojectConfig',
    'Task',
    'TaskCustomization',
    'TypeScriptRoot',
    '__version__',
    'add_nx_dependency',
    'add_nx_project_dependency',
    'add_nx_task_dependency',
    'build_workspace',
    'load_config',
]
