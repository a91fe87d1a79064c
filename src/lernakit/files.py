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

"""Generated files owned by a project.

Each file knows its path relative to the owning project's outdir and
how to render itself. Rendering is pure; :meth:`GeneratedFile.write`
does the I/O. Files are rewritten in full on every synthesis.

JSON follows the npm convention (2-space indent, trailing newline).
YAML goes through ``yaml.safe_dump`` with insertion order preserved.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml


class GeneratedFile:
    """Base class for files written during synthesis.

    Args:
        path: Path relative to the project outdir (POSIX separators).
    """

    def __init__(self, path: str) -> None:
        """Initialize with the project-relative path."""
        self.path = path

    def render(self) -> str:
        """Return the full file content."""
        raise NotImplementedError

    def write(self, outdir: Path) -> Path:
        """Render and write the file under ``outdir``, returning its path."""
        target = outdir / self.path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.render(), encoding='utf-8')
        return target


class JsonFile(GeneratedFile):
    """A JSON document. ``None`` values are dropped from top-level keys."""

    def __init__(self, path: str, obj: dict[str, Any]) -> None:  # noqa: ANN401 - JSON values are untyped
        """Initialize with the object to serialize."""
        super().__init__(path)
        self.obj = obj

    def render(self) -> str:
        """Return the JSON text with a trailing newline."""
        data = {k: v for k, v in self.obj.items() if v is not None}
        return json.dumps(data, indent=2, ensure_ascii=False) + '\n'


class YamlFile(GeneratedFile):
    """A YAML document."""

    def __init__(self, path: str, obj: dict[str, Any]) -> None:  # noqa: ANN401 - YAML values are untyped
        """Initialize with the object to serialize."""
        super().__init__(path)
        self.obj = obj

    def render(self) -> str:
        """Return the YAML text."""
        return yaml.safe_dump(self.obj, sort_keys=False, default_flow_style=False)


class SourceCode(GeneratedFile):
    """A line-oriented text file with indentation tracking.

    ``open()`` writes a line and indents what follows; ``close()``
    dedents and writes a line. Used for the Markdown and HTML indexes.

    Args:
        path: Path relative to the project outdir.
        indent: Spaces per indentation level.
    """

    def __init__(self, path: str, *, indent: int = 2) -> None:
        """Initialize an empty source file."""
        super().__init__(path)
        self._indent = indent
        self._level = 0
        self._lines: list[str] = []

    def line(self, code: str = '') -> None:
        """Append one line at the current indentation."""
        if code:
            self._lines.append(' ' * (self._indent * self._level) + code)
        else:
            self._lines.append('')

    def open(self, code: str = '') -> None:
        """Append a line and increase the indentation."""
        if code:
            self.line(code)
        self._level += 1

    def close(self, code: str = '') -> None:
        """Decrease the indentation and append a line."""
        if self._level == 0:
            raise ValueError(f'Cannot close below indentation level 0 in {self.path}')
        self._level -= 1
        if code:
            self.line(code)

    @property
    def lines(self) -> list[str]:
        """The lines written so far."""
        return list(self._lines)

    def render(self) -> str:
        """Return the lines joined with newlines."""
        if not self._lines:
            return ''
        return '\n'.join(self._lines) + '\n'


__all__ = [
    'GeneratedFile',
    'JsonFile',
    'SourceCode',
    'YamlFile',
]
