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

"""Minimal project model: projects, tasks, steps and synthesis.

A :class:`Project` is a directory that gets a ``package.json``, a
``.projen/tasks.json`` and a set of generated files. Projects nest: the
root owns its sub-projects, a sub-project only keeps a back-reference.

Key Concepts (ELI5)::

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Concept             │ ELI5 Explanation                               │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Step                │ One line of a recipe: run a shell command,     │
    │                     │ run another task, or run a built-in script.    │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Task                │ A named recipe: an ordered list of steps.      │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Project             │ A folder with tasks, a package.json and files  │
    │                     │ to write. Can own sub-projects.                │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ synth()             │ Write everything to disk, sub-projects too.    │
    └─────────────────────┴────────────────────────────────────────────────┘

Lifecycle tasks created for every project::

    build ──spawn──→ default
          ──spawn──→ pre-compile → compile → post-compile
          ──spawn──→ test
          ──spawn──→ package

Usage::

    from lernakit.project import Project, ProjectKind

    root = Project('monorepo', outdir=Path('/work/monorepo'))
    sub = Project('core', outdir=Path('/work/monorepo/packages/core'))
    root.add_subproject(sub)
    root.synth()
"""

from __future__ import annotations

import enum
import json
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lernakit.errors import E, LernaKitError
from lernakit.files import GeneratedFile
from lernakit.logging import get_logger
from lernakit.paths import subproject_path

logger = get_logger(__name__)

TASKS_FILE = '.projen/tasks.json'

_USE_DEFAULT = object()


class ProjectKind(str, enum.Enum):
    """Supported project flavors."""

    NODE = 'node'
    TYPESCRIPT = 'typescript'


class PackageManager(str, enum.Enum):
    """Node package managers a project can be configured with."""

    NPM = 'npm'
    YARN = 'yarn'
    PNPM = 'pnpm'


def default_docs_directory(kind: ProjectKind) -> str | None:
    """Return the docs directory a project of ``kind`` gets when none is given.

    TypeScript projects publish API docs under ``docs``; node projects
    have none.
    """
    return 'docs' if kind is ProjectKind.TYPESCRIPT else None


@dataclass(frozen=True)
class Step:
    """A single task step.

    Exactly one of ``exec``, ``spawn`` or ``builtin`` is set.
    """

    exec: str | None = None
    spawn: str | None = None
    builtin: str | None = None

    def __post_init__(self) -> None:
        """Reject steps that are not exactly one kind."""
        kinds = [k for k in (self.exec, self.spawn, self.builtin) if k is not None]
        if len(kinds) != 1:
            raise ValueError('A step needs exactly one of exec, spawn or builtin')

    def to_dict(self) -> dict[str, str]:
        """Return the ``tasks.json`` representation."""
        if self.exec is not None:
            return {'exec': self.exec}
        if self.spawn is not None:
            return {'spawn': self.spawn}
        return {'builtin': self.builtin or ''}


class Task:
    """A named, ordered sequence of steps.

    Args:
        name: Task name, unique within its project.
        description: Human-readable description.
        condition: Shell expression; the task is skipped when it fails.
        env: Environment variables set while the task runs.
        exec: Optional initial shell step.
    """

    def __init__(
        self,
        name: str,
        *,
        description: str = '',
        condition: str = '',
        env: dict[str, str] | None = None,
        exec: str | None = None,  # noqa: A002 - mirrors the tasks.json key
    ) -> None:
        """Initialize the task, optionally with one shell step."""
        self.name = name
        self.description = description
        self.condition = condition
        self.env: dict[str, str] = dict(env or {})
        self._steps: list[Step] = []
        if exec is not None:
            self.exec(exec)

    @property
    def steps(self) -> list[Step]:
        """A copy of the current steps, in execution order."""
        return list(self._steps)

    def exec(self, command: str) -> None:
        """Append a shell step."""
        self._steps.append(Step(exec=command))

    def prepend_exec(self, command: str) -> None:
        """Insert a shell step before all existing steps."""
        self._steps.insert(0, Step(exec=command))

    def spawn(self, task: Task) -> None:
        """Append a step that runs ``task``."""
        self._steps.append(Step(spawn=task.name))

    def builtin(self, name: str) -> None:
        """Append a step that runs a built-in script."""
        self._steps.append(Step(builtin=name))

    def reset(self, command: str | None = None) -> None:
        """Clear all steps, optionally leaving a single shell step."""
        self._steps.clear()
        if command is not None:
            self.exec(command)

    def to_dict(self) -> dict[str, Any]:  # noqa: ANN401 - JSON values are untyped
        """Return the ``tasks.json`` representation."""
        data: dict[str, Any] = {'name': self.name}  # noqa: ANN401
        if self.description:
            data['description'] = self.description
        if self.condition:
            data['condition'] = self.condition
        if self.env:
            data['env'] = dict(self.env)
        if self._steps:
            data['steps'] = [step.to_dict() for step in self._steps]
        return data

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f'Task({self.name!r}, steps={len(self._steps)})'


class Tasks:
    """Ordered, name-keyed collection of :class:`Task` objects."""

    def __init__(self) -> None:
        """Initialize an empty collection."""
        self._tasks: dict[str, Task] = {}

    def add_task(
        self,
        name: str,
        *,
        description: str = '',
        condition: str = '',
        env: dict[str, str] | None = None,
        exec: str | None = None,  # noqa: A002 - mirrors the tasks.json key
    ) -> Task:
        """Create and register a task.

        Raises:
            LernaKitError: If a task with the same name already exists.
        """
        if name in self._tasks:
            raise LernaKitError(
                code=E.TASK_DUPLICATE,
                message=f"A task named '{name}' already exists",
                hint='Use try_find() to reuse the existing task.',
            )
        task = Task(name, description=description, condition=condition, env=env, exec=exec)
        self._tasks[name] = task
        return task

    def try_find(self, name: str) -> Task | None:
        """Return the task called ``name`` or ``None``."""
        return self._tasks.get(name)

    def remove_task(self, name: str) -> Task | None:
        """Unregister and return the task called ``name``, if any."""
        return self._tasks.pop(name, None)

    def __iter__(self) -> Iterator[Task]:
        """Iterate over tasks in registration order."""
        return iter(list(self._tasks.values()))

    def __len__(self) -> int:
        """Return the number of tasks."""
        return len(self._tasks)

    def to_dict(self) -> dict[str, Any]:  # noqa: ANN401 - JSON values are untyped
        """Return the ``tasks.json`` document."""
        return {'tasks': {task.name: task.to_dict() for task in self._tasks.values()}}


class PackageManifest:
    """The ``package.json`` of a project.

    Args:
        package_name: The npm package name.
    """

    def __init__(self, package_name: str) -> None:
        """Initialize with the package name."""
        self.package_name = package_name
        self.dev_dependencies: list[str] = []
        self._fields: dict[str, Any] = {}  # noqa: ANN401

    def add_dev_deps(self, *deps: str) -> None:
        """Register dev dependencies, ignoring ones already present."""
        for dep in deps:
            if dep not in self.dev_dependencies:
                self.dev_dependencies.append(dep)

    def add_field(self, name: str, value: Any) -> None:  # noqa: ANN401 - arbitrary JSON
        """Set a top-level field, replacing any previous value."""
        self._fields[name] = value

    def get_field(self, name: str) -> Any:  # noqa: ANN401 - arbitrary JSON
        """Return a top-level field or ``None``."""
        return self._fields.get(name)

    def remove_field(self, name: str) -> None:
        """Drop a top-level field if present."""
        self._fields.pop(name, None)

    def to_dict(self) -> dict[str, Any]:  # noqa: ANN401 - JSON values are untyped
        """Return the ``package.json`` document."""
        data: dict[str, Any] = {'name': self.package_name}  # noqa: ANN401
        if self.dev_dependencies:
            data['devDependencies'] = {dep: '*' for dep in sorted(self.dev_dependencies)}
        data.update(self._fields)
        return data


class Project:
    """A synthesizable project directory.

    Args:
        name: Project (and package) name.
        outdir: Output directory. Defaults to the current directory.
        kind: Project flavor; typescript projects get a ``docgen`` task.
        package_manager: Node package manager used by the project.
        artifacts_directory: Directory for packaged artifacts.
        docs_directory: Documentation output directory, when the project
            produces docs. ``None`` or an empty string means no docs.
            Defaults to :func:`default_docs_directory` for ``kind``.
        release: Add the ``bump``/``unbump`` release tasks.
    """

    def __init__(
        self,
        name: str,
        *,
        outdir: Path | None = None,
        kind: ProjectKind = ProjectKind.NODE,
        package_manager: PackageManager = PackageManager.NPM,
        artifacts_directory: str = 'dist',
        docs_directory: str | None | object = _USE_DEFAULT,
        release: bool = False,
    ) -> None:
        """Initialize the project and its standard lifecycle tasks."""
        self.name = name
        self.outdir = (outdir if outdir is not None else Path.cwd()).resolve()
        self.kind = kind
        self.package_manager = package_manager
        self.artifacts_directory = artifacts_directory
        if docs_directory is _USE_DEFAULT:
            docs_directory = default_docs_directory(kind)
        self.docs_directory: str | None = docs_directory if isinstance(docs_directory, str) and docs_directory else None
        self.parent: Project | None = None
        self.tasks = Tasks()
        self.package = PackageManifest(name)
        self.npmrc: dict[str, str] = {}
        self.gitattributes: dict[str, list[str]] = {}
        self._files: dict[str, GeneratedFile] = {}
        self._subprojects: list[Project] = []
        self._pre_synth_hooks: list[Callable[[], None]] = []
        self._add_lifecycle_tasks()
        if release:
            self._add_release_tasks()

    def _add_lifecycle_tasks(self) -> None:
        add = self.tasks.add_task
        default = add('default', description='Synthesize project files')
        pre_compile = add('pre-compile', description='Prepare the project for compilation')
        compile_ = add('compile', description='Only compile')
        post_compile = add('post-compile', description='Runs after successful compilation')
        test = add('test', description='Run tests')
        package = add('package', description='Creates the distribution package')
        build = add('build', description='Full release build')
        for step in (default, pre_compile, compile_, post_compile, test, package):
            build.spawn(step)
        if self.kind is ProjectKind.TYPESCRIPT:
            compile_.exec('tsc --build')
            add('docgen', description='Generate API.md from .jsii manifest')
        add('upgrade', description='upgrade dependencies')
        add('post-upgrade', description='Runs after upgrading dependencies')
        add('clobber', description='hard resets to HEAD of origin and cleans the local repo')

    def _add_release_tasks(self) -> None:
        add = self.tasks.add_task
        add(
            'bump',
            description='Bumps version based on latest git tag and generates a changelog entry',
            condition='git log --oneline -1 | grep -qv "chore(release):"',
        ).builtin('release/bump-version')
        add(
            'unbump',
            description='Restores version to 0.0.0',
        ).builtin('release/reset-version')

    @property
    def default_task(self) -> Task | None:
        """The ``default`` task, if present."""
        return self.tasks.try_find('default')

    @property
    def build_task(self) -> Task | None:
        """The ``build`` task, if present."""
        return self.tasks.try_find('build')

    @property
    def pre_compile_task(self) -> Task | None:
        """The ``pre-compile`` task, if present."""
        return self.tasks.try_find('pre-compile')

    @property
    def post_compile_task(self) -> Task | None:
        """The ``post-compile`` task, if present."""
        return self.tasks.try_find('post-compile')

    @property
    def package_task(self) -> Task | None:
        """The ``package`` task, if present."""
        return self.tasks.try_find('package')

    @property
    def artifacts_javascript_directory(self) -> str:
        """Where JavaScript tarballs are placed inside the artifacts dir."""
        return f'{self.artifacts_directory}/js'

    @property
    def subprojects(self) -> list[Project]:
        """Registered sub-projects, in registration order."""
        return list(self._subprojects)

    @property
    def files(self) -> list[GeneratedFile]:
        """Generated files, in registration order."""
        return list(self._files.values())

    def add_task(
        self,
        name: str,
        *,
        description: str = '',
        condition: str = '',
        env: dict[str, str] | None = None,
        exec: str | None = None,  # noqa: A002 - mirrors the tasks.json key
    ) -> Task:
        """Shorthand for ``self.tasks.add_task``."""
        return self.tasks.add_task(name, description=description, condition=condition, env=env, exec=exec)

    def add_subproject(self, subproject: Project) -> None:
        """Register ``subproject`` as a member of this project.

        Raises:
            LernaKitError: If the sub-project's outdir is not below this
                project's outdir, or another sub-project already uses
                the same relative path.
        """
        path = subproject_path(self, subproject)
        for existing in self._subprojects:
            if subproject_path(self, existing) == path:
                raise LernaKitError(
                    code=E.SUBPROJECT_DUPLICATE_PATH,
                    message='A sub project is defined with the same output path',
                    hint=f"'{existing.name}' and '{subproject.name}' both resolve to '{path}'.",
                )
        subproject.parent = self
        self._subprojects.append(subproject)
        logger.debug('subproject_added', project=self.name, subproject=subproject.name, path=path)

    def add_file(self, file: GeneratedFile) -> GeneratedFile:
        """Register a generated file, replacing one at the same path."""
        self._files[file.path] = file
        return file

    def try_find_file(self, path: str) -> GeneratedFile | None:
        """Return the generated file at ``path`` or ``None``."""
        return self._files.get(path)

    def remove_file(self, path: str) -> None:
        """Unregister the generated file at ``path`` if present."""
        self._files.pop(path, None)

    def add_gitattributes(self, pattern: str, *attributes: str) -> None:
        """Attach attributes to a path pattern in ``.gitattributes``."""
        current = self.gitattributes.setdefault(pattern, [])
        for attribute in attributes:
            if attribute not in current:
                current.append(attribute)

    def on_pre_synthesize(self, hook: Callable[[], None]) -> None:
        """Register a callback that runs right before files are written."""
        self._pre_synth_hooks.append(hook)

    def pre_synthesize(self) -> None:
        """Run pre-synthesis hooks, in registration order."""
        for hook in self._pre_synth_hooks:
            hook()

    def synth(self) -> list[Path]:
        """Write all project files and synthesize sub-projects.

        Returns:
            The paths written, this project's first.
        """
        self.pre_synthesize()
        written = self._write_files()
        for subproject in self._subprojects:
            written.extend(subproject.synth())
        logger.info('synthesized', project=self.name, files=len(written))
        return written

    def _write_files(self) -> list[Path]:
        self.outdir.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []

        written.append(_write_json(self.outdir / 'package.json', self.package.to_dict()))
        written.append(_write_json(self.outdir / TASKS_FILE, self.tasks.to_dict()))

        if self.gitattributes:
            lines = [f'{pattern} {" ".join(attrs)}' for pattern, attrs in self.gitattributes.items()]
            written.append(_write_text(self.outdir / '.gitattributes', '\n'.join(lines) + '\n'))
        if self.npmrc:
            lines = [f'{key}={value}' for key, value in self.npmrc.items()]
            written.append(_write_text(self.outdir / '.npmrc', '\n'.join(lines) + '\n'))

        for file in self._files.values():
            written.append(file.write(self.outdir))
        return written

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f'Project({self.name!r}, outdir={str(self.outdir)!r})'


def _write_json(path: Path, data: dict[str, Any]) -> Path:  # noqa: ANN401 - JSON values are untyped
    return _write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + '\n')


def _write_text(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')
    return path


__all__ = [
    'PackageManager',
    'PackageManifest',
    'Project',
    'ProjectKind',
    'Step',
    'Task',
    'Tasks',
    'default_docs_directory',
]
