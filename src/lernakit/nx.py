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

"""Nx task-runner annotations for member packages.

Writes the ``nx`` field of a project's ``package.json``. See
https://nx.dev/reference/project-configuration for the format::

    "nx": {
      "targets": {
        "test": {
          "dependsOn": [{"projects": ["project-2"], "target": "lint"}],
          "cache": true,
          "inputs": ["src/**"],
          "outputs": ["coverage"]
        }
      },
      "implicitDependencies": ["project-3"]
    }

Repeated calls on the same project accumulate: ``targets`` entries are
merged by task name, other top-level keys are replaced by the newest
call.

Usage::

    from lernakit.nx import add_nx_task_dependency, add_nx_project_dependency

    add_nx_task_dependency(app, 'test', 'lint', core, utils)
    add_nx_project_dependency(app, core)
"""

from __future__ import annotations

import warnings
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from lernakit.errors import E, LernaKitError, LernaKitWarning
from lernakit.logging import get_logger
from lernakit.project import Project

logger = get_logger(__name__)

NX_FIELD = 'nx'


@dataclass(frozen=True)
class NxTaskDependency:
    """A task that depends on a task in other projects.

    Attributes:
        task_name: The dependent task.
        depends_on_task_name: The task it depends on. Empty means the
            dependency is on the projects as a whole.
        depends_on_projects: Projects providing the dependency.
        cache: Whether Nx caches the task result. ``None`` leaves it unset.
        inputs: What goes into the computation hash.
        outputs: Folders the task writes to.
    """

    task_name: str
    depends_on_task_name: str = ''
    depends_on_projects: Sequence[Project] = ()
    cache: bool | None = None
    inputs: Sequence[str] = ()
    outputs: Sequence[str] = ()


@dataclass(frozen=True)
class NxProjectDependency:
    """Projects the annotated project implicitly depends on."""

    depends_on_projects: Sequence[Project] = ()


def _target_entry(dependency: NxTaskDependency) -> dict[str, Any]:  # noqa: ANN401 - JSON values are untyped
    entry: dict[str, Any] = {}  # noqa: ANN401
    projects = [p.package.package_name for p in dependency.depends_on_projects]
    if projects or dependency.depends_on_task_name:
        depends_on: dict[str, Any] = {}  # noqa: ANN401
        if projects:
            depends_on['projects'] = projects
        if dependency.depends_on_task_name:
            depends_on['target'] = dependency.depends_on_task_name
        entry['dependsOn'] = [depends_on]
    if dependency.cache is not None:
        entry['cache'] = dependency.cache
    if dependency.inputs:
        entry['inputs'] = list(dependency.inputs)
    if dependency.outputs:
        entry['outputs'] = list(dependency.outputs)
    return entry


def tasks_annotation(dependencies: Sequence[NxTaskDependency]) -> dict[str, Any]:  # noqa: ANN401
    """Build the ``targets`` annotation for task dependencies."""
    return {'targets': {dep.task_name: _target_entry(dep) for dep in dependencies}}


def project_annotation(depends_on: Sequence[Project]) -> dict[str, Any]:  # noqa: ANN401
    """Build the ``implicitDependencies`` annotation."""
    return {'implicitDependencies': [p.package.package_name for p in depends_on]}


def merge_annotation(project: Project, annotation: dict[str, Any]) -> dict[str, Any]:  # noqa: ANN401
    """Merge ``annotation`` into the project's ``nx`` field and return it."""
    existing = project.package.get_field(NX_FIELD) or {}
    merged = {**existing, **annotation}
    if 'targets' in existing and 'targets' in annotation:
        merged['targets'] = {**existing['targets'], **annotation['targets']}
    project.package.add_field(NX_FIELD, merged)
    logger.debug('nx_annotation_merged', project=project.name, keys=sorted(merged))
    return merged


def add_nx_task_dependency(
    project: Project,
    task_name: str,
    depends_on_task_name: str,
    *depends_on_projects: Project,
) -> None:
    """Make ``task_name`` depend on ``depends_on_task_name`` in other projects.

    See https://nx.dev/reference/project-configuration#dependson
    """
    dependency = NxTaskDependency(
        task_name=task_name,
        depends_on_task_name=depends_on_task_name,
        depends_on_projects=depends_on_projects,
    )
    merge_annotation(project, tasks_annotation([dependency]))


def add_nx_project_dependency(project: Project, *depends_on: Project) -> None:
    """Declare implicit project dependencies.

    See https://nx.dev/reference/project-configuration#implicitdependencies
    """
    merge_annotation(project, project_annotation(depends_on))


def add_nx_dependency(
    project: Project,
    *,
    task_dependency: NxTaskDependency | None = None,
    tasks_dependency: Sequence[NxTaskDependency] | None = None,
    project_dependency: NxProjectDependency | None = None,
) -> None:
    """Add task and/or project dependencies in one annotation.

    Args:
        project: The project to annotate.
        task_dependency: Deprecated single-task form; use
            ``tasks_dependency``.
        tasks_dependency: Task dependencies.
        project_dependency: Implicit project dependencies.

    Raises:
        LernaKitError: If both ``task_dependency`` and
            ``tasks_dependency`` are given.
    """
    if task_dependency is not None and tasks_dependency is not None:
        raise LernaKitError(
            code=E.NX_CONFLICTING_OPTIONS,
            message='Task Dependency and Tasks dependency option cannot be used in conjunction',
            hint='Move the task_dependency entry into tasks_dependency.',
        )

    if task_dependency is not None:
        warnings.warn(
            LernaKitWarning(
                E.DEPRECATED_OPTION,
                "'task_dependency' is deprecated",
                hint="Pass a list via 'tasks_dependency' instead.",
            ),
            stacklevel=2,
        )
        logger.warning('deprecated_option', option='task_dependency', project=project.name)
        tasks_dependency = [task_dependency]

    annotation: dict[str, Any] = {}  # noqa: ANN401
    if project_dependency is not None:
        annotation.update(project_annotation(project_dependency.depends_on_projects))
    if tasks_dependency is not None:
        annotation.update(tasks_annotation(tasks_dependency))
    merge_annotation(project, annotation)


__all__ = [
    'NX_FIELD',
    'NxProjectDependency',
    'NxTaskDependency',
    'add_nx_dependency',
    'add_nx_project_dependency',
    'add_nx_task_dependency',
    'merge_annotation',
    'project_annotation',
    'tasks_annotation',
]
