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

"""Configuration for lernakit workspaces.

Options are one flat, frozen :class:`LernaOptions` record regardless of
which root flavor (``node`` or ``typescript``) is selected. They can be
built in code or read from ``lernakit.toml`` at the workspace root.

Validation Pipeline::

    lernakit.toml
    ┌──────────────────┐
    │ use_nx = "yes"    │  ← wrong type
    │ indepedent = true │  ← typo
    └────────┬─────────┘
             │
             ▼
    ┌──────────────────┐     ┌──────────────────────────────┐
    │ 1. Unknown key   │────→│ LK-CONFIG-INVALID-KEY:       │
    │    detection     │     │ hint: "Did you mean          │
    └────────┬─────────┘     │       'independent_mode'?"   │
             │               └──────────────────────────────┘
             ▼
    ┌──────────────────┐     ┌──────────────────────────────┐
    │ 2. Type check    │────→│ LK-CONFIG-INVALID-VALUE:     │
    │    each value    │     │ 'use_nx' must be bool        │
    └────────┬─────────┘     └──────────────────────────────┘
             │
             ▼
    ┌──────────────────┐     ┌──────────────────────────────┐
    │ 3. Value check   │────→│ LK-CONFIG-INVALID-VALUE:     │
    │    (enums, etc.) │     │ kind must be "node" or       │
    └────────┬─────────┘     │ "typescript"                 │
             ▼               └──────────────────────────────┘
    ┌──────────────────┐
    │ LernaOptions()   │  ← frozen dataclass
    └──────────────────┘

Supported keys in ``lernakit.toml``::

    name                         = "monorepo"       # required
    kind                         = "node"           # "node" | "typescript"
    package_manager              = "pnpm"           # "npm" | "yarn" | "pnpm"
    pnpm_version                 = "9"
    artifacts_directory          = "dist"
    since_last_release           = false
    since_git_reference_env_var  = "SINCE_REF"
    use_nx                       = false
    independent_mode             = false
    use_workspaces               = false
    docgen                       = false
    docs_directory               = "docs"
    projenrc_ts                  = false            # node flavor only
    has_root_source_code         = false            # typescript flavor only

    [task_customizations.test]
    add_lerna_step     = true
    include            = ["@acme/*"]
    exclude            = ["@acme/legacy"]
    since_last_release = true

    [[subprojects]]
    name           = "@acme/core"
    path           = "packages/core"
    kind           = "typescript"
    docs_directory = "docs"
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomlkit
import tomlkit.exceptions

from lernakit.errors import E, LernaKitError
from lernakit.logging import get_logger
from lernakit.project import PackageManager, ProjectKind

logger = get_logger(__name__)

CONFIG_FILENAME = 'lernakit.toml'

VALID_KEYS: frozenset[str] = frozenset({
    'artifacts_directory',
    'docgen',
    'docs_directory',
    'has_root_source_code',
    'independent_mode',
    'kind',
    'name',
    'package_manager',
    'pnpm_version',
    'projenrc_ts',
    'since_git_reference_env_var',
    'since_last_release',
    'subprojects',
    'task_customizations',
    'use_nx',
    'use_workspaces',
})

VALID_CUSTOMIZATION_KEYS: frozenset[str] = frozenset({
    'add_lerna_step',
    'exclude',
    'include',
    'since_last_release',
})

VALID_SUBPROJECT_KEYS: frozenset[str] = frozenset({
    'artifacts_directory',
    'docs_directory',
    'kind',
    'name',
    'path',
})

_TYPE_MAP: dict[str, type | tuple[type, ...]] = {
    'artifacts_directory': str,
    'docgen': bool,
    'docs_directory': str,
    'has_root_source_code': bool,
    'independent_mode': bool,
    'kind': str,
    'name': str,
    'package_manager': str,
    'pnpm_version': (str, int),
    'projenrc_ts': bool,
    'since_git_reference_env_var': str,
    'since_last_release': bool,
    'subprojects': list,
    'task_customizations': dict,
    'use_nx': bool,
    'use_workspaces': bool,
}

_CUSTOMIZATION_TYPE_MAP: dict[str, type | tuple[type, ...]] = {
    'add_lerna_step': bool,
    'exclude': list,
    'include': list,
    'since_last_release': bool,
}

_SUBPROJECT_TYPE_MAP: dict[str, type | tuple[type, ...]] = {
    'artifacts_directory': str,
    'docs_directory': str,
    'kind': str,
    'name': str,
    'path': str,
}


@dataclass(frozen=True)
class TaskCustomization:
    """Per-task override of the lerna delegation step.

    Attributes:
        add_lerna_step: Whether to append the ``lerna run`` step at all.
        include: Package-name globs passed as ``--scope``, in order.
        exclude: Package-name globs passed as ``--ignore``, in order.
        since_last_release: Overrides the project-wide flag when set.
    """

    add_lerna_step: bool = True
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    since_last_release: bool | None = None


@dataclass(frozen=True)
class SubprojectConfig:
    """A member package declared in ``lernakit.toml``.

    Attributes:
        name: Package name.
        path: Directory relative to the workspace root.
        kind: Project flavor.
        docs_directory: Docs output directory. ``None`` (key absent) picks the
            default for ``kind``; an empty string means the package has no docs.
        artifacts_directory: Packaged artifacts directory.
    """

    name: str
    path: str
    kind: ProjectKind = ProjectKind.NODE
    docs_directory: str | None = None
    artifacts_directory: str = 'dist'


@dataclass(frozen=True)
class LernaOptions:
    """Validated options for a lerna workspace.

    Attributes:
        name: Root package name.
        outdir: Root output directory (defaults to the current directory).
        kind: Root flavor, ``node`` or ``typescript``.
        package_manager: Package manager of the root project.
        pnpm_version: Major pnpm version; ``>= 9`` enables hoisted linking.
        artifacts_directory: Root artifacts directory.
        since_last_release: Run delegated tasks only for packages changed
            since the last release tag.
        since_git_reference_env_var: Environment variable holding the
            git reference for ``--since``. Empty means the last ``v*`` tag.
        use_nx: Let lerna schedule tasks through Nx.
        independent_mode: Version packages independently.
        use_workspaces: List members in ``package.json`` ``workspaces``
            (and ``pnpm-workspace.yaml`` for pnpm) instead of ``lerna.json``.
        docgen: Aggregate sub-project docs into ``docs_directory``.
        docs_directory: Centralized docs directory.
        projenrc_ts: Node flavor: the projenrc is TypeScript.
        has_root_source_code: TypeScript flavor: keep root compilation.
        task_customizations: Per-task overrides keyed by task name.
        subprojects: Members declared in ``lernakit.toml``.
    """

    name: str
    outdir: Path | None = None
    kind: ProjectKind = ProjectKind.NODE
    package_manager: PackageManager = PackageManager.NPM
    pnpm_version: str = ''
    artifacts_directory: str = 'dist'
    since_last_release: bool = False
    since_git_reference_env_var: str = ''
    use_nx: bool = False
    independent_mode: bool = False
    use_workspaces: bool = False
    docgen: bool = False
    docs_directory: str = 'docs'
    projenrc_ts: bool = False
    has_root_source_code: bool = False
    task_customizations: dict[str, TaskCustomization] = field(default_factory=dict)
    subprojects: tuple[SubprojectConfig, ...] = ()


def _check_keys(raw: dict[str, Any], valid: frozenset[str], context: str) -> None:  # noqa: ANN401
    for key in raw:
        if key in valid:
            continue
        suggestion = difflib.get_close_matches(key, valid, n=1, cutoff=0.6)
        hint = f"Did you mean '{suggestion[0]}'?" if suggestion else f'Valid keys: {sorted(valid)}'
        raise LernaKitError(
            code=E.CONFIG_INVALID_KEY,
            message=f"Unknown key '{key}' in {context}",
            hint=hint,
        )


def _check_types(
    raw: dict[str, Any],  # noqa: ANN401 - dynamic config values
    type_map: dict[str, type | tuple[type, ...]],
    context: str,
) -> None:
    for key, value in raw.items():
        expected = type_map.get(key)
        if expected is None:
            continue
        # bool is an int subclass; keep 'pnpm_version = true' out.
        if isinstance(value, bool) and expected in (int, (str, int)):
            ok = False
        else:
            ok = isinstance(value, expected)
        if not ok:
            type_name = expected.__name__ if isinstance(expected, type) else ' or '.join(t.__name__ for t in expected)
            raise LernaKitError(
                code=E.CONFIG_INVALID_VALUE,
                message=f"'{key}' must be {type_name}, got {type(value).__name__}",
                hint=f'Check the value of {key} in {context}.',
            )


def _check_string_list(key: str, items: list[object], context: str) -> tuple[str, ...]:
    for item in items:
        if not isinstance(item, str):
            raise LernaKitError(
                code=E.CONFIG_INVALID_VALUE,
                message=f"'{key}' items must be strings, got {type(item).__name__}: {item!r}",
                hint=f'Each {key} entry should be a glob pattern string in {context}.',
            )
    return tuple(str(item) for item in items)


def _parse_kind(value: str, context: str) -> ProjectKind:
    try:
        return ProjectKind(value)
    except ValueError:
        raise LernaKitError(
            code=E.CONFIG_INVALID_VALUE,
            message=f"kind must be one of {sorted(k.value for k in ProjectKind)}, got '{value}'",
            hint=f'Check the kind value in {context}.',
        ) from None


def _parse_package_manager(value: str) -> PackageManager:
    try:
        return PackageManager(value)
    except ValueError:
        raise LernaKitError(
            code=E.CONFIG_INVALID_VALUE,
            message=f"package_manager must be one of {sorted(p.value for p in PackageManager)}, got '{value}'",
            hint="Use 'npm', 'yarn' or 'pnpm'.",
        ) from None


def parse_task_customization(task_name: str, raw: dict[str, Any]) -> TaskCustomization:  # noqa: ANN401
    """Validate one ``[task_customizations.<task>]`` table."""
    context = f'[task_customizations.{task_name}]'
    _check_keys(raw, VALID_CUSTOMIZATION_KEYS, context)
    _check_types(raw, _CUSTOMIZATION_TYPE_MAP, context)
    return TaskCustomization(
        add_lerna_step=raw.get('add_lerna_step', True),
        include=_check_string_list('include', raw.get('include', []), context),
        exclude=_check_string_list('exclude', raw.get('exclude', []), context),
        since_last_release=raw.get('since_last_release'),
    )


def _parse_subproject(index: int, raw: dict[str, Any]) -> SubprojectConfig:  # noqa: ANN401
    context = f'[[subprojects]] #{index + 1}'
    _check_keys(raw, VALID_SUBPROJECT_KEYS, context)
    _check_types(raw, _SUBPROJECT_TYPE_MAP, context)
    for required in ('name', 'path'):
        if not raw.get(required):
            raise LernaKitError(
                code=E.CONFIG_INVALID_VALUE,
                message=f"Missing required key '{required}' in {context}",
                hint='Every sub-project needs a name and a path.',
            )
    return SubprojectConfig(
        name=raw['name'],
        path=raw['path'],
        kind=_parse_kind(raw.get('kind', 'node'), context),
        docs_directory=raw.get('docs_directory'),
        artifacts_directory=raw.get('artifacts_directory', 'dist'),
    )


def parse_options(raw: dict[str, Any], *, outdir: Path | None = None) -> LernaOptions:  # noqa: ANN401
    """Validate a raw mapping and build :class:`LernaOptions`.

    Raises:
        LernaKitError: On unknown keys, wrong types or invalid values.
    """
    _check_keys(raw, VALID_KEYS, CONFIG_FILENAME)
    _check_types(raw, _TYPE_MAP, CONFIG_FILENAME)

    if not raw.get('name'):
        raise LernaKitError(
            code=E.CONFIG_INVALID_VALUE,
            message=f"Missing required key 'name' in {CONFIG_FILENAME}",
            hint='Set name = "<root package name>".',
        )

    kwargs: dict[str, Any] = {  # noqa: ANN401
        k: v for k, v in raw.items() if k not in ('kind', 'package_manager', 'pnpm_version', 'subprojects', 'task_customizations')
    }
    kwargs['kind'] = _parse_kind(raw.get('kind', 'node'), CONFIG_FILENAME)
    kwargs['package_manager'] = _parse_package_manager(raw.get('package_manager', 'npm'))
    if 'pnpm_version' in raw:
        kwargs['pnpm_version'] = str(raw['pnpm_version'])

    customizations: dict[str, TaskCustomization] = {}
    for task_name, table in dict(raw.get('task_customizations', {})).items():
        if not isinstance(table, dict):
            raise LernaKitError(
                code=E.CONFIG_INVALID_VALUE,
                message=f'[task_customizations.{task_name}] must be a table, got {type(table).__name__}',
            )
        customizations[task_name] = parse_task_customization(task_name, dict(table))
    kwargs['task_customizations'] = customizations

    subprojects: list[SubprojectConfig] = []
    for index, entry in enumerate(raw.get('subprojects', [])):
        if not isinstance(entry, dict):
            raise LernaKitError(
                code=E.CONFIG_INVALID_VALUE,
                message=f'[[subprojects]] entries must be tables, got {type(entry).__name__}',
            )
        subprojects.append(_parse_subproject(index, dict(entry)))
    kwargs['subprojects'] = tuple(subprojects)

    return LernaOptions(outdir=outdir, **kwargs)


def load_config(workspace_root: Path) -> LernaOptions:
    """Load and validate ``lernakit.toml`` from ``workspace_root``.

    Raises:
        LernaKitError: If the file is missing, unreadable or invalid.
    """
    config_path = workspace_root / CONFIG_FILENAME
    if not config_path.is_file():
        raise LernaKitError(
            code=E.CONFIG_NOT_FOUND,
            message=f'No {CONFIG_FILENAME} found in {workspace_root}',
            hint='Create a lernakit.toml with at least a "name" key.',
        )

    try:
        text = config_path.read_text(encoding='utf-8')
    except OSError as exc:
        raise LernaKitError(
            code=E.CONFIG_NOT_FOUND,
            message=f'Failed to read {config_path}: {exc}',
        ) from exc

    try:
        doc = tomlkit.parse(text)
    except tomlkit.exceptions.TOMLKitError as exc:
        raise LernaKitError(
            code=E.CONFIG_PARSE_ERROR,
            message=f'Failed to parse {config_path}: {exc}',
        ) from exc

    options = parse_options(doc.unwrap(), outdir=workspace_root)
    logger.debug('config_loaded', path=str(config_path), subprojects=len(options.subprojects))
    return options



__all__ = [
    'CONFIG_FILENAME',
    'VALID_CUSTOMIZATION_KEYS',
    'VALID_KEYS',
    'VALID_SUBPROJECT_KEYS',
    'LernaOptions',
    'SubprojectConfig',
    'TaskCustomization',
    'load_config',
    'parse_options',
    'parse_task_customization',
]
