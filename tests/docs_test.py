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

"""Tests for lernakit.docs module."""

from __future__ import annotations

from pathlib import Path

from lernakit.docs import DocsAggregator, docs_directory_of, extract_jsii_docs_output
from lernakit.project import Project, ProjectKind


def _workspace(tmp_path: Path) -> tuple[Project, Project, Project, Project]:
    root = Project('root', outdir=tmp_path)
    jsii = Project('jsii', outdir=tmp_path / 'packages' / 'jsii', kind=ProjectKind.TYPESCRIPT, docs_directory='docs/')
    jsii.tasks.try_find('docgen').exec('jsii-docgen -o API.md')  # type: ignore[union-attr]
    plain = Project('plain', outdir=tmp_path / 'packages' / 'plain', docs_directory='site')
    undocumented = Project('undocumented', outdir=tmp_path / 'packages' / 'undocumented')
    for sub in (jsii, plain, undocumented):
        root.add_subproject(sub)
    return root, jsii, plain, undocumented


class TestHelpers:
    """Tests for the module-level helpers."""

    def test_docs_directory_strips_slash(self, tmp_path: Path) -> None:
        """Trailing slashes are dropped."""
        assert docs_directory_of(Project('p', outdir=tmp_path, docs_directory='docs/')) == 'docs'
        assert docs_directory_of(Project('p', outdir=tmp_path)) is None

    def test_extract_jsii_output(self, tmp_path: Path) -> None:
        """The -o argument of a jsii-docgen step is returned."""
        project = Project('p', outdir=tmp_path, kind=ProjectKind.TYPESCRIPT)
        project.tasks.try_find('docgen').exec('JSII-DOCGEN -o docs/API.md')  # type: ignore[union-attr]
        assert extract_jsii_docs_output(project.tasks) == 'docs/API.md'

    def test_extract_without_docgen(self, tmp_path: Path) -> None:
        """Projects without a docgen task have no jsii output."""
        assert extract_jsii_docs_output(Project('p', outdir=tmp_path).tasks) is None


class TestDocsAggregator:
    """Tests for DocsAggregator."""

    def test_disabled_is_noop(self, tmp_path: Path) -> None:
        """Nothing is scheduled or written when disabled."""
        root, *_ = _workspace(tmp_path)
        aggregator = DocsAggregator(root, enabled=False)
        aggregator.schedule_moves()
        assert aggregator.aggregate() == {}
        assert root.files == []
        assert root.post_compile_task is not None
        assert root.post_compile_task.steps == []
        assert root.gitattributes == {}

    def test_schedule_moves(self, tmp_path: Path) -> None:
        """Each documented member gets a move-docs step."""
        root, *_ = _workspace(tmp_path)
        DocsAggregator(root, enabled=True).schedule_moves()
        assert root.post_compile_task is not None
        assert [s.exec for s in root.post_compile_task.steps] == [
            'lernakit move-docs docs packages/jsii docs',
            'lernakit move-docs docs packages/plain site',
        ]

    def test_aggregate_entries(self, tmp_path: Path) -> None:
        """jsii members link their API docs, others link index.html."""
        root, *_ = _workspace(tmp_path)
        entries = DocsAggregator(root, enabled=True).aggregate()
        assert entries == {
            'jsii': 'packages/jsii/API.md',
            'plain': 'packages/plain/index.html',
        }

    def test_aggregate_files(self, tmp_path: Path) -> None:
        """index.md, README.md and index.html are registered."""
        root, *_ = _workspace(tmp_path)
        DocsAggregator(root, docs_directory='docs/', enabled=True).aggregate()

        index_md = root.try_find_file('docs/index.md')
        readme = root.try_find_file('docs/README.md')
        index_html = root.try_find_file('docs/index.html')
        assert index_md is not None
        assert readme is not None
        assert index_html is not None

        assert index_md.render() == '- ## [jsii](packages/jsii/API.md)\n'
        assert readme.render() == (
            '- ## [jsii](../packages/jsii/README.md)\n- ## [plain](../packages/plain/README.md)\n'
        )
        assert index_html.render() == (
            '<!DOCTYPE html>\n'
            '<html>\n'
            '  <body>\n'
            '    <ul>\n'
            '      <li>\n'
            '        <a href="packages/jsii/API.md">\n'
            '          jsii\n'
            '        </a>\n'
            '      </li>\n'
            '      <li>\n'
            '        <a href="packages/plain/index.html">\n'
            '          plain\n'
            '        </a>\n'
            '      </li>\n'
            '    </ul>\n'
            '  </body>\n'
            '</html>\n'
            '\n'
        )
        assert root.gitattributes == {'/docs/**': ['linguist-generated']}
