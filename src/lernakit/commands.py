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

"""Rendering of ``lerna run`` fan-out commands.

The clause order is fixed and part of the output contract::

    lerna run <task> --stream [--since <ref>] [--scope <p>]... [--ignore <p>]...

Examples::

    >>> CommandBuilder().build('test', TaskCustomization(include=('a',), exclude=('b', 'c')))
    'lerna run test --stream --scope a --ignore b --ignore c'
    >>> CommandBuilder(since_last_release=True).build('compile')
    'lerna run compile --stream --since $(git describe --abbrev=0 --tags --match "v*")'

Glob patterns are passed through verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass

from lernakit.config import TaskCustomization

LERNA_BIN = 'lerna'

LAST_RELEASE_TAG_REF = '$(git describe --abbrev=0 --tags --match "v*")'


@dataclass(frozen=True)
class CommandBuilder:
    """Builds the delegation command for a task.

    Attributes:
        since_last_release: Project-wide default for ``--since``.
        since_git_reference_env_var: When set, ``--since`` reads the
            reference from this environment variable instead of the
            last ``v*`` tag.
        tool: The orchestrator executable.
    """

    since_last_release: bool = False
    since_git_reference_env_var: str = ''
    tool: str = LERNA_BIN

    @property
    def since_ref(self) -> str:
        """The git reference expression used with ``--since``."""
        if self.since_git_reference_env_var:
            return f'${{{self.since_git_reference_env_var}}}'
        return LAST_RELEASE_TAG_REF

    def build(self, task_name: str, customization: TaskCustomization | None = None) -> str:
        """Return the command that runs ``task_name`` in every member package."""
        command = f'{self.tool} run {task_name} --stream'

        use_since = self.since_last_release
        include: tuple[str, ...] = ()
        exclude: tuple[str, ...] = ()
        if customization is not None:
            if customization.since_last_release is not None:
                use_since = customization.since_last_release
            include = customization.include
            exclude = customization.exclude

        if use_since:
            command += f' --since {self.since_ref}'
        command += ''.join(f' --scope {pattern}' for pattern in include)
        command += ''.join(f' --ignore {pattern}' for pattern in exclude)
        return command


__all__ = [
    'LAST_RELEASE_TAG_REF',
    'LERNA_BIN',
    'CommandBuilder',
]
