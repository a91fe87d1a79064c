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

"""Tests for lernakit.commands module."""

from __future__ import annotations

from lernakit.commands import LAST_RELEASE_TAG_REF, CommandBuilder
from lernakit.config import TaskCustomization


class TestCommandBuilder:
    """Tests for CommandBuilder.build()."""

    def test_plain(self) -> None:
        """No options: run and stream."""
        assert CommandBuilder().build('test') == 'lerna run test --stream'

    def test_since_last_release(self) -> None:
        """The project-wide flag adds --since with the last v* tag."""
        command = CommandBuilder(since_last_release=True).build('test')
        assert command == 'lerna run test --stream --since $(git describe --abbrev=0 --tags --match "v*")'

    def test_since_env_var(self) -> None:
        """An env var replaces the tag lookup."""
        builder = CommandBuilder(since_last_release=True, since_git_reference_env_var='SINCE_REF')
        assert builder.since_ref == '${SINCE_REF}'
        assert builder.build('test') == 'lerna run test --stream --since ${SINCE_REF}'

    def test_env_var_without_since_flag(self) -> None:
        """The env var alone does not enable --since."""
        assert CommandBuilder(since_git_reference_env_var='X').build('test') == 'lerna run test --stream'

    def test_customization_overrides_since(self) -> None:
        """A task-level since flag beats the project default, both ways."""
        on = CommandBuilder(since_last_release=False)
        off = CommandBuilder(since_last_release=True)
        assert '--since' in on.build('test', TaskCustomization(since_last_release=True))
        assert '--since' not in off.build('test', TaskCustomization(since_last_release=False))

    def test_unset_customization_since_keeps_default(self) -> None:
        """since_last_release=None inherits the project default."""
        builder = CommandBuilder(since_last_release=True)
        assert builder.build('test', TaskCustomization()) == f'lerna run test --stream --since {LAST_RELEASE_TAG_REF}'

    def test_scope_and_ignore_order(self) -> None:
        """--since comes first, then scopes, then ignores, each in order."""
        custom = TaskCustomization(include=('a', 'b'), exclude=('c', 'd'), since_last_release=True)
        command = CommandBuilder(since_git_reference_env_var='REF').build('compile', custom)
        assert command == 'lerna run compile --stream --since ${REF} --scope a --scope b --ignore c --ignore d'

    def test_globs_verbatim(self) -> None:
        """Glob patterns are not quoted or expanded."""
        command = CommandBuilder().build('test', TaskCustomization(exclude=('@acme/legacy-*',)))
        assert command == 'lerna run test --stream --ignore @acme/legacy-*'
