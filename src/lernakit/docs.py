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

"""Documentation aggregation across member packages.

Members that declare a ``docs_directory`` get their docs moved into the
root docs directory after compilation, and three index files link them::

    docs/
    ├── index.html    every documented member, anchored list
    ├── index.md      members whose API docs come from jsii-docgen
    ├── README.md     every documented member's README
    └── <member path>/...   moved by "lernakit move-docs"

A member's link target is the ``-o`` output of its ``jsii-docgen`` step
when one is found in its ``docgen`` task, else ``<path>/index.html``.
"""

from __future__ import annotations

import re

from lernakit.files import SourceCode
from lernakit.logging import get_logger
from lernakit.paths import subproject_path
from lernakit.project import Project, Tasks
from lernakit.rewriter import CLI_BIN

logger = get_logger(__name__)

DOCGEN_TASK = 'docgen'

_JSII_DOCGEN_RE = re.compile(r'jsii-docgen -o (?P<output>.+)$', re.IGNORECASE)


def docs_directory_of(project: Project) -> str | None:
    """Return the project's docs directory without a trailing slash."""
    if not project.docs_directory:
        return None
    return project.docs_directory.rstrip('/') or None


def extract_jsii_docs_output(tasks: Tasks) -> str | None:
    """Return the ``-o`` argument of a ``jsii-docgen`` step in ``docgen``."""
    task = tasks.try_find(DOCGEN_TASK)
    if task is None:
        return None
    for step in task.steps:
        match = _JSII_DOCGEN_RE.search(step.exec or '')
        if match:
            return match.group('output')
    return None


class DocsAggregator:
    """Collects member docs into the root project's docs directory.

    Args:
        project: The root project.
        docs_directory: Root docs directory, relative to its outdir.
        enabled: When false every method is a no-op.
    """

    def __init__(self, project: Project, *, docs_directory: str = 'docs', enabled: bool = False) -> None:
        """Initialize the aggregator."""
        self.project = project
        self.docs_directory = docs_directory.rstrip('/')
        self.enabled = enabled

    def _documented_members(self) -> list[tuple[Project, str, str]]:
        members: list[tuple[Project, str, str]] = []
        for subproject in self.project.subprojects:
            docs_dir = docs_directory_of(subproject)
            if docs_dir is None:
                continue
            members.append((subproject, subproject_path(self.project, subproject), docs_dir))
        return members

    def schedule_moves(self) -> None:
        """Add a ``move-docs`` step per documented member to ``post-compile``."""
        post_compile = self.project.post_compile_task
        if not self.enabled or post_compile is None:
            return
        for _, path, docs_dir in self._documented_members():
            post_compile.exec(f'{CLI_BIN} move-docs {self.docs_directory} {path} {docs_dir}')

    def aggregate(self) -> dict[str, str]:
        """Register the index files and mark the docs tree as generated.

        Returns:
            Member name to docs link, in registration order. Empty when
            aggregation is disabled.
        """
        if not self.enabled:
            return {}

        entries: dict[str, str] = {}
        index_md = SourceCode(f'{self.docs_directory}/index.md')
        readme_md = SourceCode(f'{self.docs_directory}/README.md')

        for subproject, path, _ in self._documented_members():
            jsii_output = extract_jsii_docs_output(subproject.tasks)
            if jsii_output:
                docs_path = f'{path}/{jsii_output}'
                index_md.line(f'- ## [{subproject.name}]({docs_path})')
                entries[subproject.name] = docs_path
            else:
                entries[subproject.name] = f'{path}/index.html'
            readme_md.line(f'- ## [{subproject.name}](../{path}/README.md)')

        self.project.add_file(index_md)
        self.project.add_file(readme_md)
        self.project.add_file(_render_index_html(f'{self.docs_directory}/index.html', entries))
        self.project.add_gitattributes(f'/{self.docs_directory}/**', 'linguist-generated')
        logger.debug('docs_aggregated', members=len(entries), docs_directory=self.docs_directory)
        return entries


def _render_index_html(path: str, entries: dict[str, str]) -> SourceCode:
    html = SourceCode(path)
    html.line('<!DOCTYPE html>')
    html.line('<html>')
    html.open('<body>')
    html.open('<ul>')
    for name, docs_path in entries.items():
        html.open('<li>')
        html.open(f'<a href="{docs_path}">')
        html.line(name)
        html.close('</a>')
        html.close('</li>')
    html.close('</ul>')
    html.close('</body>')
    html.line('</html>')
    html.line()
    return html


__all__ = [
    'DOCGEN_TASK',
    'DocsAggregator',
    'docs_directory_of',
    'extract_jsii_docs_output',
]
