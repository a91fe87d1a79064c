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

"""Tests for lernakit.fileops module."""

from __future__ import annotations

from pathlib import Path

import pytest
from lernakit.fileops import clean_dist, copy_dist, move_docs


def _write(path: Path, content: str = '') -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')
    return path


class TestCleanDist:
    """Tests for clean_dist()."""

    @pytest.mark.asyncio
    async def test_preserves_release_files(self, tmp_path: Path) -> None:
        """Release metadata survives, everything else goes."""
        dist = tmp_path / 'dist'
        _write(dist / 'changelog.md', '## 1.0.0')
        _write(dist / 'version.txt', '1.0.0')
        _write(dist / 'js' / 'pkg-1.0.0.tgz', 'tarball')
        _write(dist / 'other.txt', 'x')

        kept = await clean_dist(dist)

        assert sorted(p.name for p in kept) == ['changelog.md', 'version.txt']
        assert sorted(p.name for p in dist.iterdir()) == ['changelog.md', 'version.txt']
        assert (dist / 'changelog.md').read_text(encoding='utf-8') == '## 1.0.0'

    @pytest.mark.asyncio
    async def test_empty_release_file_kept(self, tmp_path: Path) -> None:
        """An empty release file is still restored."""
        dist = tmp_path / 'dist'
        _write(dist / 'releasetag.txt', '')
        await clean_dist(dist)
        assert (dist / 'releasetag.txt').is_file()

    @pytest.mark.asyncio
    async def test_missing_dist_created(self, tmp_path: Path) -> None:
        """A missing directory is created empty."""
        dist = tmp_path / 'dist'
        assert await clean_dist(dist) == []
        assert dist.is_dir()
        assert list(dist.iterdir()) == []


class TestCopyDist:
    """Tests for copy_dist()."""

    @pytest.mark.asyncio
    async def test_copies_and_overwrites(self, tmp_path: Path) -> None:
        """Files and directories are copied over existing ones."""
        src = tmp_path / 'packages' / 'core' / 'dist'
        dst = tmp_path / 'dist'
        _write(src / 'js' / 'core-1.0.0.tgz', 'new')
        _write(src / 'version.txt', '1.0.0')
        _write(dst / 'js' / 'core-1.0.0.tgz', 'old')
        _write(dst / 'js' / 'cli-1.0.0.tgz', 'cli')

        targets = await copy_dist(src, dst)

        assert targets == [dst / 'js', dst / 'version.txt']
        assert (dst / 'js' / 'core-1.0.0.tgz').read_text(encoding='utf-8') == 'new'
        assert (dst / 'js' / 'cli-1.0.0.tgz').read_text(encoding='utf-8') == 'cli'
        assert (src / 'version.txt').is_file()

    @pytest.mark.asyncio
    async def test_missing_source_is_noop(self, tmp_path: Path) -> None:
        """A member without artifacts is skipped."""
        assert await copy_dist(tmp_path / 'nope', tmp_path / 'dist') == []
        assert not (tmp_path / 'dist').exists()


class TestMoveDocs:
    """Tests for move_docs()."""

    @pytest.mark.asyncio
    async def test_moves_docs_and_api(self, tmp_path: Path) -> None:
        """Docs contents and API.md end up under the root docs directory."""
        member = tmp_path / 'packages' / 'core'
        _write(member / 'docs' / 'index.html', '<html/>')
        _write(member / 'docs' / 'assets' / 'style.css', 'body{}')
        _write(member / 'API.md', '# API')
        stale = _write(tmp_path / 'docs' / 'packages' / 'core' / 'old.html', 'old')

        moved = await move_docs(Path('docs'), 'packages/core', 'docs', root=tmp_path)

        destination = tmp_path / 'docs' / 'packages' / 'core'
        assert sorted(p.name for p in moved) == ['API.md', 'assets', 'index.html']
        assert (destination / 'API.md').read_text(encoding='utf-8') == '# API'
        assert (destination / 'assets' / 'style.css').is_file()
        assert not stale.exists()
        assert not (member / 'API.md').exists()
        assert list((member / 'docs').iterdir()) == []

    @pytest.mark.asyncio
    async def test_api_only(self, tmp_path: Path) -> None:
        """A member with only API.md still has it moved."""
        _write(tmp_path / 'core' / 'API.md', '# API')
        moved = await move_docs(Path('docs'), 'core', 'docs', root=tmp_path)
        assert moved == [tmp_path / 'docs' / 'core' / 'API.md']

    @pytest.mark.asyncio
    async def test_nothing_to_move(self, tmp_path: Path) -> None:
        """No docs and no API.md leaves the destination untouched."""
        existing = _write(tmp_path / 'docs' / 'core' / 'keep.html')
        assert await move_docs(Path('docs'), 'core', 'docs', root=tmp_path) == []
        assert existing.exists()

    @pytest.mark.asyncio
    async def test_defaults_to_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Paths are resolved against the current directory by default."""
        monkeypatch.chdir(tmp_path)
        _write(tmp_path / 'core' / 'API.md', '# API')
        await move_docs(Path('docs'), 'core', 'docs')
        assert (tmp_path / 'docs' / 'core' / 'API.md').is_file()
