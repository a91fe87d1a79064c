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

"""Sub-project path resolution.

Every member package lives in a directory strictly below the root
project's outdir. The relative path is what ends up in ``lerna.json``,
``pnpm-workspace.yaml`` and the copy/move steps, so it is always
rendered with POSIX separators.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath
from typing import TYPE_CHECKING

from lernakit.errors import E, LernaKitError

if TYPE_CHECKING:
    from lernakit.project import Project


def relative_outdir(parent_outdir: Path, sub_outdir: Path) -> str:
    """Return ``sub_outdir`` relative to ``parent_outdir`` as a POSIX path.

    Raises:
        LernaKitError: If ``sub_outdir`` is not strictly below
            ``parent_outdir``.
    """
    parent = parent_outdir.resolve()
    sub = sub_outdir.resolve()
    try:
        relative = PurePath(os.path.relpath(sub, parent)).as_posix()
    except ValueError:
        # Different drives on Windows.
        relative = sub.as_posix()

    if relative in ('', '.') or relative == '..' or relative.startswith('../') or PurePath(relative).is_absolute():
        raise LernaKitError(
            code=E.SUBPROJECT_OUTSIDE_ROOT,
            message='A sub project out dir should exists within the lerna package',
            hint=f"'{sub}' is not below '{parent}'.",
        )
    return relative


def subproject_path(parent: Project, subproject: Project) -> str:
    """Return the path of ``subproject`` relative to ``parent``."""
    return relative_outdir(parent.outdir, subproject.outdir)


__all__ = [
    'relative_outdir',
    'subproject_path',
]
