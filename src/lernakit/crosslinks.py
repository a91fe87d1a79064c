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

"""Cross-link manifests: where the member packages live.

Two modes::

    use_workspaces = false            use_workspaces = true
    ┌────────────────────────┐        ┌────────────────────────┐
    │ lerna.json             │        │ lerna.json             │
    │   useNx, version,      │        │   useNx, version       │
    │   packages: [...]      │        ├────────────────────────┤
    └────────────────────────┘        │ package.json           │
                                      │   workspaces: [...]    │
                                      ├────────────────────────┤
                                      │ pnpm-workspace.yaml    │
                                      │   packages: [...]      │
                                      │   (pnpm only)          │
                                      └────────────────────────┘
"""

from __future__ import annotations

from typing import Any

from lernakit.files import JsonFile, YamlFile
from lernakit.logging import get_logger
from lernakit.paths import subproject_path
from lernakit.project import PackageManager, Project

logger = get_logger(__name__)

LERNA_JSON = 'lerna.json'
PNPM_WORKSPACE_YAML = 'pnpm-workspace.yaml'

FIXED_VERSION = '0.0.0'
INDEPENDENT_VERSION = 'independent'


def member_paths(project: Project) -> list[str]:
    """Relative paths of every registered member, in registration order."""
    return [subproject_path(project, subproject) for subproject in project.subprojects]


def emit_cross_links(
    project: Project,
    *,
    use_nx: bool = False,
    independent_mode: bool = False,
    use_workspaces: bool = False,
) -> dict[str, Any]:  # noqa: ANN401 - JSON values are untyped
    """Register ``lerna.json`` (and workspace files) on ``project``.

    Returns:
        The ``lerna.json`` content.
    """
    packages = member_paths(project)
    lerna_config: dict[str, Any] = {  # noqa: ANN401
        'useNx': use_nx,
        'version': INDEPENDENT_VERSION if independent_mode else FIXED_VERSION,
    }

    if use_workspaces:
        if project.package_manager is PackageManager.PNPM:
            project.add_file(YamlFile(PNPM_WORKSPACE_YAML, {'packages': packages}))
        else:
            project.remove_file(PNPM_WORKSPACE_YAML)
        project.package.add_field('workspaces', packages)
    else:
        project.remove_file(PNPM_WORKSPACE_YAML)
        project.package.remove_field('workspaces')
        lerna_config['packages'] = packages

    project.add_file(JsonFile(LERNA_JSON, lerna_config))
    logger.debug('cross_links_emitted', packages=len(packages), workspaces=use_workspaces)
    return lerna_config


__all__ = [
    'FIXED_VERSION',
    'INDEPENDENT_VERSION',
    'LERNA_JSON',
    'PNPM_WORKSPACE_YAML',
    'emit_cross_links',
    'member_paths',
]
