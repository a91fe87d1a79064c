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

"""Tests for lernakit.config module."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest
from lernakit.config import (
    CONFIG_FILENAME,
    LernaOptions,
    TaskCustomization,
    load_config,
    parse_options,
    parse_task_customization,
)
from lernakit.errors import E, LernaKitError
from lernakit.project import PackageManager, ProjectKind


def _write_config(root: Path, content: str) -> None:
    (root / CONFIG_FILENAME).write_text(content, encoding='utf-8')


class TestLernaOptionsDefaults:
    """LernaOptions has sensible defaults."""

    def test_defaults(self) -> None:
        """Test defaults."""
        options = LernaOptions(name='root')
        assert options.kind is ProjectKind.NODE
        assert options.package_manager is PackageManager.NPM
        assert options.since_last_release is False
        assert options.docs_directory == 'docs'
        assert options.task_customizations == {}
        assert options.subprojects == ()

    def test_frozen(self) -> None:
        """Test frozen."""
        options = LernaOptions(name='root')
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.name = 'other'  # type: ignore[misc]


class TestParseOptions:
    """Tests for parse_options()."""

    def test_minimal(self) -> None:
        """Only name is required."""
        options = parse_options({'name': 'root'})
        assert options.name == 'root'

    def test_missing_name(self) -> None:
        """A missing name is rejected."""
        with pytest.raises(LernaKitError) as exc_info:
            parse_options({})
        assert exc_info.value.code is E.CONFIG_INVALID_VALUE

    def test_unknown_key_suggests(self) -> None:
        """Typos get a did-you-mean hint."""
        with pytest.raises(LernaKitError) as exc_info:
            parse_options({'name': 'root', 'indepedent_mode': True})
        assert exc_info.value.code is E.CONFIG_INVALID_KEY
        assert "'independent_mode'" in exc_info.value.hint

    def test_wrong_type(self) -> None:
        """Values are type checked."""
        with pytest.raises(LernaKitError, match="'use_nx' must be bool"):
            parse_options({'name': 'root', 'use_nx': 'yes'})

    def test_pnpm_version_accepts_int(self) -> None:
        """pnpm_version may be written as a number."""
        options = parse_options({'name': 'root', 'package_manager': 'pnpm', 'pnpm_version': 9})
        assert options.pnpm_version == '9'
        assert options.package_manager is PackageManager.PNPM

    def test_pnpm_version_rejects_bool(self) -> None:
        """Booleans are not versions."""
        with pytest.raises(LernaKitError):
            parse_options({'name': 'root', 'pnpm_version': True})

    def test_invalid_kind(self) -> None:
        """Unknown kinds are rejected."""
        with pytest.raises(LernaKitError, match='kind must be one of'):
            parse_options({'name': 'root', 'kind': 'python'})

    def test_invalid_package_manager(self) -> None:
        """Unknown package managers are rejected."""
        with pytest.raises(LernaKitError, match='package_manager must be one of'):
            parse_options({'name': 'root', 'package_manager': 'bun'})

    def test_outdir_passed_through(self, tmp_path: Path) -> None:
        """outdir comes from the caller, not the file."""
        assert parse_options({'name': 'root'}, outdir=tmp_path).outdir == tmp_path

    def test_subprojects(self) -> None:
        """[[subprojects]] entries become SubprojectConfig records."""
        options = parse_options({
            'name': 'root',
            'subprojects': [
                {'name': '@acme/core', 'path': 'packages/core', 'kind': 'typescript', 'docs_directory': 'docs'},
                {'name': '@acme/cli', 'path': 'packages/cli'},
            ],
        })
        core, cli = options.subprojects
        assert core.kind is ProjectKind.TYPESCRIPT
        assert core.docs_directory == 'docs'
        assert cli.kind is ProjectKind.NODE
        assert cli.docs_directory is None
        assert cli.artifacts_directory == 'dist'

    def test_subproject_empty_docs_directory(self) -> None:
        """An empty docs_directory is kept so the member can opt out of docs."""
        options = parse_options({
            'name': 'root',
            'subprojects': [{'name': 'core', 'path': 'packages/core', 'kind': 'typescript', 'docs_directory': ''}],
        })
        assert options.subprojects[0].docs_directory == ''

    def test_subproject_missing_path(self) -> None:
        """Sub-projects need a path."""
        with pytest.raises(LernaKitError, match="Missing required key 'path'"):
            parse_options({'name': 'root', 'subprojects': [{'name': 'x'}]})


class TestParseTaskCustomization:
    """Tests for parse_task_customization()."""

    def test_full(self) -> None:
        """All keys map onto the record."""
        custom = parse_task_customization(
            'test',
            {'add_lerna_step': False, 'include': ['a*'], 'exclude': ['b'], 'since_last_release': True},
        )
        assert custom == TaskCustomization(
            add_lerna_step=False,
            include=('a*',),
            exclude=('b',),
            since_last_release=True,
        )

    def test_since_last_release_unset(self) -> None:
        """An absent since_last_release stays None."""
        assert parse_task_customization('test', {}).since_last_release is None

    def test_non_string_glob(self) -> None:
        """Glob lists must hold strings."""
        with pytest.raises(LernaKitError, match="'include' items must be strings"):
            parse_task_customization('test', {'include': [1]})


class TestLoadConfig:
    """Tests for load_config()."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing lernakit.toml is reported."""
        with pytest.raises(LernaKitError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code is E.CONFIG_NOT_FOUND

    def test_parse_error(self, tmp_path: Path) -> None:
        """Malformed TOML is reported."""
        _write_config(tmp_path, 'name = \n')
        with pytest.raises(LernaKitError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code is E.CONFIG_PARSE_ERROR

    def test_full_file(self, tmp_path: Path) -> None:
        """A complete file round-trips into LernaOptions."""
        _write_config(
            tmp_path,
            'name = "monorepo"\n'
            'package_manager = "pnpm"\n'
            'pnpm_version = "9.1.0"\n'
            'since_last_release = true\n'
            'use_workspaces = true\n'
            '\n'
            '[task_customizations.test]\n'
            'exclude = ["legacy-*"]\n'
            '\n'
            '[[subprojects]]\n'
            'name = "core"\n'
            'path = "packages/core"\n',
        )
        options = load_config(tmp_path)
        assert options.name == 'monorepo'
        assert options.outdir == tmp_path
        assert options.pnpm_version == '9.1.0'
        assert options.since_last_release is True
        assert options.use_workspaces is True
        assert options.task_customizations['test'].exclude == ('legacy-*',)
        assert options.subprojects[0].path == 'packages/core'
