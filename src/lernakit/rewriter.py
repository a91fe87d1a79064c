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

"""Task graph rewriting for lerna workspaces.

Running a lifecycle task on the root must run it in every member
package. The rewriter walks the root's tasks and appends a ``lerna run``
step to each, except for a locked set whose rewrite would recurse or
break bootstrapping.

Rewrite rules::

    ┌──────────────────┬────────────────────────────────────────────────────┐
    │ Task             │ Rewrite                                            │
    ├──────────────────┼────────────────────────────────────────────────────┤
    │ package          │ reset to "mkdir -p dist/js", then delegated, then  │
    │                  │ one "copy-dist" step per member                    │
    ├──────────────────┼────────────────────────────────────────────────────┤
    │ pre-compile      │ "clean-dist dist" prepended, then delegated        │
    ├──────────────────┼────────────────────────────────────────────────────┤
    │ post-upgrade     │ unfiltered "lerna run upgrade" prepended,          │
    │                  │ "npx projen" appended, never delegated             │
    ├──────────────────┼────────────────────────────────────────────────────┤
    │ default, build,  │ never delegated                                    │
    │ upgrade, clobber │                                                    │
    ├──────────────────┼────────────────────────────────────────────────────┤
    │ anything else    │ delegated unless add_lerna_step is false           │
    └──────────────────┴────────────────────────────────────────────────────┘

Members additionally get their own ``bump``/``unbump`` tasks pointing at
their artifact files, so the root release flow can version each package.
"""

from __future__ import annotations

from collections.abc import Mapping

from packaging.version import InvalidVersion, Version

from lernakit.commands import CommandBuilder
from lernakit.config import TaskCustomization
from lernakit.errors import E, LernaKitError
from lernakit.logging import get_logger
from lernakit.paths import subproject_path
from lernakit.project import PackageManager, Project, Task

logger = get_logger(__name__)

LOCKED_TASK_NAMES: frozenset[str] = frozenset({
    'build',
    'clobber',
    'default',
    'post-upgrade',
    'upgrade',
    'upgrade-projen',
})

CLI_BIN = 'lernakit'
PROJEN_COMMAND = 'npx projen'
UPGRADE_TASK = 'upgrade'
POST_UPGRADE_TASK = 'post-upgrade'
PACKAGE_ALL_TASK = 'package-all'

# Minimum pnpm major version that needs hoisted node_modules for lerna.
PNPM_HOISTED_MIN_MAJOR = 9


def _major_version(version: str) -> int | None:
    try:
        return Version(version.strip()).major
    except InvalidVersion:
        return None


def bump_env(artifacts_directory: str) -> dict[str, str]:
    """Environment for a member's bump/unbump tasks."""
    return {
        'OUTFILE': 'package.json',
        'CHANGELOG': f'{artifacts_directory}/changelog.md',
        'BUMPFILE': f'{artifacts_directory}/version.txt',
        'RELEASETAG': f'{artifacts_directory}/releasetag.txt',
        'RELEASE_TAG_PREFIX': '',
    }


class TaskGraphRewriter:
    """Rewrites a root project's tasks to fan out to member packages.

    Args:
        project: The root project. Its tasks are mutated in place.
        builder: Renders the delegation commands.
        customizations: Per-task overrides keyed by task name.
        pnpm_version: Root pnpm version, for the hoisting switch.
        locked_task_names: Tasks that never get a delegation step.
    """

    def __init__(
        self,
        project: Project,
        *,
        builder: CommandBuilder,
        customizations: Mapping[str, TaskCustomization],
        pnpm_version: str = '',
        locked_task_names: frozenset[str] = LOCKED_TASK_NAMES,
    ) -> None:
        """Initialize the rewriter."""
        self.project = project
        self.builder = builder
        self.customizations = customizations
        self.pnpm_version = pnpm_version
        self.locked_task_names = locked_task_names

    def rewrite(self) -> None:
        """Rewrite the root task graph.

        Raises:
            LernaKitError: If the root project has no default or build task.
        """
        if self.project.default_task is None:
            raise LernaKitError(
                code=E.DEFAULT_TASK_MISSING,
                message='Could not find default task',
                hint=f"Project '{self.project.name}' must define a 'default' task.",
            )
        if self.project.build_task is None:
            raise LernaKitError(
                code=E.BUILD_TASK_MISSING,
                message='Could not find build task',
                hint=f"Project '{self.project.name}' must define a 'build' task.",
            )

        package_task = self.project.package_task
        if package_task is not None:
            package_task.reset(f'mkdir -p {self.project.artifacts_javascript_directory}')

        pre_compile = self.project.pre_compile_task
        if pre_compile is not None:
            pre_compile.prepend_exec(f'{CLI_BIN} clean-dist {self.project.artifacts_directory}')

        self._setup_package_manager()
        self._rewrite_upgrade_flow()
        self._append_delegation_steps()
        logger.info('task_graph_rewritten', project=self.project.name, tasks=len(self.project.tasks))

    def _setup_package_manager(self) -> None:
        if self.project.package_manager is not PackageManager.PNPM:
            return
        major = _major_version(self.pnpm_version)
        if major is not None and major >= PNPM_HOISTED_MIN_MAJOR:
            self.project.npmrc['node-linker'] = 'hoisted'

    def _rewrite_upgrade_flow(self) -> None:
        post_upgrade = self.project.tasks.try_find(POST_UPGRADE_TASK)
        if post_upgrade is None:
            return
        post_upgrade.prepend_exec(
            self.builder.build(UPGRADE_TASK, TaskCustomization(since_last_release=False)),
        )
        post_upgrade.exec(PROJEN_COMMAND)

    def _append_delegation_steps(self) -> None:
        for task in self.project.tasks:
            if task.name in self.locked_task_names:
                continue
            customization = self.customizations.get(task.name)
            if customization is not None and not customization.add_lerna_step:
                logger.debug('delegation_skipped', task=task.name)
                continue
            command = self.builder.build(task.name, customization)
            task.exec(command)
            logger.debug('task_delegated', task=task.name, command=command)

    def update_subprojects(self) -> None:
        """Wire every member's package, default and bump tasks to the root."""
        root = self.project
        bump_task = root.tasks.try_find('bump')
        unbump_task = root.tasks.try_find('unbump')

        for subproject in root.subprojects:
            path = subproject_path(root, subproject)

            package_all = subproject.tasks.try_find(PACKAGE_ALL_TASK)
            sub_package = subproject.package_task
            if package_all is not None and sub_package is not None:
                sub_package.spawn(package_all)

            artifacts = subproject.artifacts_directory
            if root.package_task is not None:
                root.package_task.exec(f'{CLI_BIN} copy-dist {path}/{artifacts} {root.artifacts_directory}')

            if subproject.default_task is not None:
                subproject.default_task.reset()

            env = bump_env(artifacts)
            _add_member_task(subproject, bump_task, env, 'release/bump-version')
            _add_member_task(subproject, unbump_task, env, 'release/reset-version')


def _add_member_task(subproject: Project, template: Task | None, env: dict[str, str], builtin: str) -> None:
    if template is None or subproject.tasks.try_find(template.name) is not None:
        return
    task = subproject.add_task(
        template.name,
        description=template.description,
        condition=template.condition,
        env=env,
    )
    task.builtin(builtin)
    logger.debug('member_task_added', project=subproject.name, task=template.name)


__all__ = [
    'CLI_BIN',
    'LOCKED_TASK_NAMES',
    'PROJEN_COMMAND',
    'TaskGraphRewriter',
    'bump_env',
]
