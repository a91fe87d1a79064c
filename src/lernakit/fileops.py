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

"""Async file helpers behind the ``clean-dist``, ``copy-dist`` and
``move-docs`` commands.

These run inside generated task steps, so a missing source directory is
never an error: the step simply has nothing to do. Blocking filesystem
calls run in worker threads via :func:`asyncio.to_thread` and fan out
with :func:`asyncio.gather`.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

import aiofiles

from lernakit.errors import E, LernaKitError
from lernakit.logging import get_logger

logger = get_logger(__name__)

# Release metadata that survives a clean of the artifacts directory.
PRESERVED_DIST_FILES: tuple[str, ...] = ('changelog.md', 'version.txt', 'releasetag.txt')

API_DOCS_FILE = 'API.md'


def _failed(action: str, path: Path, exc: OSError) -> LernaKitError:
    return LernaKitError(
        code=E.FILE_OPERATION_FAILED,
        message=f'Failed to {action} {path}: {exc}',
        hint=f'Check that {path} is accessible and not locked by another process.',
    )


async def _read_bytes(path: Path) -> bytes | None:
    if not path.is_file():
        return None
    try:
        async with aiofiles.open(path, mode='rb') as f:
            return await f.read()
    except OSError as exc:
        raise _failed('read', path, exc) from exc


async def _write_bytes(path: Path, content: bytes) -> None:
    try:
        async with aiofiles.open(path, mode='wb') as f:
            await f.write(content)
    except OSError as exc:
        raise _failed('write', path, exc) from exc


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _empty_dir(directory: Path) -> None:
    """Delete everything inside ``directory``, creating it if missing."""
    try:
        if directory.is_dir():
            for entry in directory.iterdir():
                _remove(entry)
        else:
            directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise _failed('empty', directory, exc) from exc


def _copy(src: Path, dst: Path) -> None:
    try:
        if src.is_dir():
            shutil.copytree(src, dst, dirs_exist_ok=True)
        else:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dst)
    except OSError as exc:
        raise _failed('copy', src, exc) from exc


def _move(src: Path, dst: Path) -> None:
    try:
        if dst.exists():
            _remove(dst)
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(src), str(dst))
    except OSError as exc:
        raise _failed('move', src, exc) from exc


async def clean_dist(dist: Path) -> list[Path]:
    """Empty ``dist``, keeping the release metadata files.

    Returns:
        The preserved files that were restored.
    """
    paths = [dist / name for name in PRESERVED_DIST_FILES]
    contents = await asyncio.gather(*(_read_bytes(p) for p in paths))
    await asyncio.to_thread(_empty_dir, dist)

    kept = [(path, content) for path, content in zip(paths, contents, strict=True) if content is not None]
    await asyncio.gather(*(_write_bytes(path, content) for path, content in kept))
    logger.info('dist_cleaned', dist=str(dist), preserved=[p.name for p, _ in kept])
    return [path for path, _ in kept]


async def copy_dist(sub_dist: Path, parent_dist: Path) -> list[Path]:
    """Copy every entry of ``sub_dist`` into ``parent_dist``, overwriting.

    Returns:
        The destination paths. Empty when ``sub_dist`` does not exist.
    """
    if not sub_dist.is_dir():
        logger.debug('copy_dist_skipped', source=str(sub_dist))
        return []
    entries = sorted(sub_dist.iterdir())
    targets = [parent_dist / entry.name for entry in entries]
    await asyncio.gather(*(asyncio.to_thread(_copy, src, dst) for src, dst in zip(entries, targets, strict=True)))
    logger.info('dist_copied', source=str(sub_dist), destination=str(parent_dist), entries=len(targets))
    return targets


async def move_docs(parent_docs: Path, sub_path: str, sub_docs: str, *, root: Path | None = None) -> list[Path]:
    """Move a member's docs into ``<parent_docs>/<sub_path>/``.

    The member's docs directory contents are moved first, then its
    ``API.md``. The destination is emptied once, before the first move.

    Args:
        parent_docs: Root docs directory.
        sub_path: Member path relative to ``root``.
        sub_docs: Member docs directory relative to the member.
        root: Workspace root. Defaults to the current directory.

    Returns:
        The destination paths written.
    """
    base = root if root is not None else Path.cwd()
    member = base / sub_path
    destination = base / parent_docs / sub_path

    docs_dir = member / sub_docs
    api_file = member / API_DOCS_FILE
    moves: list[tuple[Path, Path]] = []
    if docs_dir.is_dir():
        moves.extend((entry, destination / entry.name) for entry in sorted(docs_dir.iterdir()))
    if api_file.is_file():
        moves.append((api_file, destination / API_DOCS_FILE))
    if not moves:
        logger.debug('move_docs_skipped', member=sub_path)
        return []

    await asyncio.to_thread(_empty_dir, destination)
    await asyncio.gather(*(asyncio.to_thread(_move, src, dst) for src, dst in moves))
    logger.info('docs_moved', member=sub_path, destination=str(destination), entries=len(moves))
    return [dst for _, dst in moves]


__all__ = [
    'API_DOCS_FILE',
    'PRESERVED_DIST_FILES',
    'clean_dist',
    'copy_dist',
    'move_docs',
]
