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

"""Tests for lernakit.crosslinks module."""

from __future__ import annotations

import json
from pathlib import Path

from lernakit.crosslinks import LERNA_JSON, PNPM_WORKSPACE_YAML, emit_cross_links, member_paths
from lernakit.project import PackageManager, Project


def _root(tmp_path: Path, manager: PackageManager = PackageManager.NPM) -> Project:
    root = Project('root', outdir=tmp_path, package_manager=manager)
    root.add_subproject(Project('b', outdir=tmp_path / 'packages' / 'b'))
    root.add_subproject(Project('a', outdir=tmp_path / 'packages' / 'a'))
    return root


class TestMemberPaths:
    """Tests for member_paths()."""

    def test_registration_order(self, tmp_path: Path) -> None:
        """Paths follow registration order, not alphabetical order."""
        assert member_paths(_root(tmp_path)) == ['packages/b', 'packages/a']


class TestEmitCrossLinks:
    """Tests for emit_cross_links()."""

    def test_lerna_json_packages(self, tmp_path: Path) -> None:
        """Without workspaces, lerna.json lists the members."""
        root = _root(tmp_path)
        config = emit_cross_links(root)
        assert config == {'useNx': False, 'version': '0.0.0', 'packages': ['packages/b', 'packages/a']}
        lerna_json = root.try_find_file(LERNA_JSON)
        assert lerna_json is not None
        assert json.loads(lerna_json.render()) == config
        assert root.package.get_field('workspaces') is None

    def test_independent_and_nx(self, tmp_path: Path) -> None:
        """Independent mode and Nx are reflected in lerna.json."""
        config = emit_cross_links(_root(tmp_path), use_nx=True, independent_mode=True)
        assert config['useNx'] is True
        assert config['version'] == 'independent'

    def test_workspaces_npm(self, tmp_path: Path) -> None:
        """Workspaces mode moves the list into package.json."""
        root = _root(tmp_path)
        config = emit_cross_links(root, use_workspaces=True)
        assert 'packages' not in config
        assert root.package.get_field('workspaces') == ['packages/b', 'packages/a']
        assert root.try_find_file(PNPM_WORKSPACE_YAML) is None

    def test_workspaces_pnpm(self, tmp_path: Path) -> None:
        """pnpm also gets pnpm-workspace.yaml."""
        root = _root(tmp_path, PackageManager.PNPM)
        emit_cross_links(root, use_workspaces=True)
        yaml_file = root.try_find_file(PNPM_WORKSPACE_YAML)
        assert yaml_file is not None
        assert yaml_file.render() == 'packages:\n- packages/b\n- packages/a\n'

    def test_toggle_back(self, tmp_path: Path) -> None:
        """Turning workspaces off removes the workspace artifacts."""
        root = _root(tmp_path, PackageManager.PNPM)
        emit_cross_links(root, use_workspaces=True)
        emit_cross_links(root, use_workspaces=False)
        assert root.try_find_file(PNPM_WORKSPACE_YAML) is None
        assert root.package.get_field('workspaces') is None

    def test_no_members(self, tmp_path: Path) -> None:
        """An empty workspace still gets lerna.json with an empty list."""
        config = emit_cross_links(Project('root', outdir=tmp_path))
        assert config['packages'] == []
