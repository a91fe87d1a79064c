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

"""Lerna workspace root project.

:class:`LernaProject` wraps a root :class:`~lernakit.project.Project`
and, right before synthesis, turns it into a multi-package workspace.

Root flavors::

    ┌──────────────────┬────────────────────────────────────────────────────┐
    │ Flavor           │ Behavior                                           │
    ├──────────────────┼────────────────────────────────────────────────────┤
    │ NodeRoot         │ default task re-runs the projenrc                  │
    │                  │ (node .projenrc.js / ts-node .projenrc.ts)         │
    ├──────────────────┼────────────────────────────────────────────────────┤
    │ TypeScriptRoot   │ root compile step removed unless the root has      │
    │                  │ its own sources; root docgen step removed          │
    └──────────────────┴────────────────────────────────────────────────────┘

Pre-synthesis pipeline::

    flavor.pre_synthesize()
         │
         ▼
    TaskGraphRewriter.rewrite()        lerna run fan-out
         │
         ▼
    emit_cross_links()                 lerna.json / workspaces
         │
         ▼
    DocsAggregator.schedule_moves()    move-docs on post-compile
    TaskGraphRewriter.update_subprojects()
         │
         ▼
    DocsAggregator.aggregate()         docs/index.{html,md}, README.md

Usage::

    from lernakit.config import LernaOptions, TaskCustomization
    from lernakit.lerna import LernaProject
    from lernakit.project import Project

    root = LernaProject(LernaOptions(name='monorepo', outdir=Path('.')))
    root.add_subproject(Project('core', outdir=Path('packages/core')))
    root.customize_task('test', TaskCustomization(exclude=('legacy-*',)))
    root.synth()
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from lernakit.commands import CommandBuilder
from lernakit.config import LernaOptions, TaskCustomization
from lernakit.crosslinks import emit_cross_links
from lernakit.docs import DocsAggregator
from lernakit.errors import E, LernaKitError
from lernakit.logging import get_logger
from lernakit.project import Project, ProjectKind, default_docs_directory
from lernakit.rewriter import LOCKED_TASK_NAMES, TaskGraphRewriter

logger = get_logger(__name__)


@dataclass(frozen=True)
class NodeRoot:
    """Plain node root project.

    Attributes:
        projenrc_ts: The projenrc is written in TypeScript.
    """

    projenrc_ts: bool = False

    @property
    def projen_command(self) -> str:
        """Command that re-synthesizes the workspace."""
        if self.projenrc_ts:
            return 'ts-node --skip-project .projenrc.ts'
        return 'node .projenrc.js'

    def configure(self, project: Project) -> None:
        """Apply construction-time changes."""
        if self.projenrc_ts:
            project.package.add_dev_deps('ts-node', 'typescript')

    def pre_synthesize(self, project: Project) -> None:
        """Point the default task at the projenrc."""
        default_task = project.default_task
        if default_task is None:
            raise LernaKitError(
                code=E.DEFAULT_TASK_MISSING,
                message='Could not find default task',
                hint=f"Project '{project.name}' must define a 'default' task.",
            )
        default_task.reset(self.projen_command)


@dataclass(frozen=True)
class TypeScriptRoot:
    """TypeScript root project.

    Attributes:
        has_root_source_code: Keep compiling sources at the root.
    """

    has_root_source_code: bool = False

    def configure(self, project: Project) -> None:
        """Apply construction-time changes."""
        if not self.has_root_source_code:
            compile_task = project.tasks.try_find('compile')
            if compile_task is not None:
                compile_task.reset()
        docgen = project.tasks.try_find('docgen')
        if docgen is not None:
            docgen.reset()

    def pre_synthesize(self, project: Project) -> None:
        """Nothing to do for this flavor."""


RootFlavor = NodeRoot | TypeScriptRoot


def flavor_for(options: LernaOptions) -> RootFlavor:
    """Select the root flavor from ``options.kind``."""
    if options.kind is ProjectKind.TYPESCRIPT:
        return TypeScriptRoot(has_root_source_code=options.has_root_source_code)
    return NodeRoot(projenrc_ts=options.projenrc_ts)


class LernaProject:
    """A root project that fans lifecycle tasks out to member packages.

    Args:
        options: Workspace options.
        locked_task_names: Tasks that never get a ``lerna run`` step.
    """

    def __init__(
        self,
        options: LernaOptions,
        *,
        locked_task_names: frozenset[str] = LOCKED_TASK_NAMES,
    ) -> None:
        """Create the root project and apply flavor-specific changes."""
        self.options = options
        self.flavor = flavor_for(options)
        self.locked_task_names = locked_task_names
        self.task_customizations: dict[str, TaskCustomization] = dict(options.task_customizations)
        self._rewritten = False
        self.project = Project(
            options.name,
            outdir=options.outdir,
            kind=options.kind,
            package_manager=options.package_manager,
            artifacts_directory=options.artifacts_directory,
            docs_directory=options.docs_directory,
            release=True,
        )
        self.project.package.add_dev_deps('lerna', 'lernakit')
        self.flavor.configure(self.project)
        self.project.on_pre_synthesize(self._pre_synthesize)

    @property
    def outdir(self) -> Path:
        """Root output directory."""
        return self.project.outdir

    @property
    def subprojects(self) -> list[Project]:
        """Registered member packages."""
        return self.project.subprojects

    def add_subproject(self, subproject: Project) -> None:
        """Register a member package.

        Raises:
            LernaKitError: If the member is not below the root outdir or
                its path collides with another member.
        """
        self.project.add_subproject(subproject)

    def customize_task(self, task_name: str, customization: TaskCustomization) -> None:
        """Override the lerna step of ``task_name``; last call wins."""
        self.task_customizations[task_name] = customization
        logger.debug('task_customized', task=task_name)

    def command_builder(self) -> CommandBuilder:
        """The builder used for delegation commands."""
        return CommandBuilder(
            since_last_release=self.options.since_last_release,
            since_git_reference_env_var=self.options.since_git_reference_env_var,
        )

    def _pre_synthesize(self) -> None:
        # Task steps are appended in place; rewriting twice would duplicate them.
        if self._rewritten:
            logger.debug('rewrite_skipped', project=self.project.name)
            return
        self.flavor.pre_synthesize(self.project)

        rewriter = TaskGraphRewriter(
            self.project,
            builder=self.command_builder(),
            customizations=self.task_customizations,
            pnpm_version=self.options.pnpm_version,
            locked_task_names=self.locked_task_names,
        )
        rewriter.rewrite()
        emit_cross_links(
            self.project,
            use_nx=self.options.use_nx,
            independent_mode=self.options.independent_mode,
            use_workspaces=self.options.use_workspaces,
        )

        docs = DocsAggregator(
            self.project,
            docs_directory=self.options.docs_directory,
            enabled=self.options.docgen,
        )
        docs.schedule_moves()
        rewriter.update_subprojects()
        docs.aggregate()
        self._rewritten = True

    def synth(self) -> list[Path]:
        """Rewrite the task graph and write every file, members included.

        The task graph is rewritten on the first call only; later calls
        write the same files again.
        """
        return self.project.synth()


def build_workspace(options: LernaOptions) -> LernaProject:
    """Create a :class:`LernaProject` with the members listed in ``options``."""
    root = LernaProject(options)
    for member in options.subprojects:
        docs_directory = member.docs_directory
        if docs_directory is None:
            docs_directory = default_docs_directory(member.kind)
        root.add_subproject(
            Project(
                member.name,
                outdir=root.outdir / member.path,
                kind=member.kind,
                package_manager=options.package_manager,
                artifacts_directory=member.artifacts_directory,
                docs_directory=docs_directory,
            ),
        )
    logger.info('workspace_built', name=options.name, members=len(options.subprojects))
    return root


__all__ = [
    'LernaProject',
    'NodeRoot',
    'RootFlavor',
    'TypeScriptRoot',
    'build_workspace',
    'flavor_for',
]
