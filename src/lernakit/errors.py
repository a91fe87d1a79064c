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

"""Structured error system for lernakit.

Every error has a unique ``LK-NAMED-KEY`` code, a human-readable message,
and an optional hint with a suggested fix. Errors are raised as
:class:`LernaKitError`; the deprecation notice is emitted as a
:class:`LernaKitWarning` through :mod:`warnings`.

Where each code comes from::

    ┌──────────────────────────────┬──────────────────────────────────────┐
    │ Code                         │ Raised by                            │
    ├──────────────────────────────┼──────────────────────────────────────┤
    │ LK-CONFIG-NOT-FOUND          │ config.load_config                   │
    │ LK-CONFIG-PARSE-ERROR        │ config.load_config                   │
    │ LK-CONFIG-INVALID-KEY        │ config.parse_options                 │
    │ LK-CONFIG-INVALID-VALUE      │ config.parse_options                 │
    │ LK-CONFIG-DEPRECATED-OPTION  │ nx.add_nx_dependency (warning)       │
    ├──────────────────────────────┼──────────────────────────────────────┤
    │ LK-SUBPROJECT-OUTSIDE-ROOT   │ Project.add_subproject               │
    │ LK-SUBPROJECT-DUPLICATE-PATH │ Project.add_subproject               │
    ├──────────────────────────────┼──────────────────────────────────────┤
    │ LK-TASK-DEFAULT-MISSING      │ TaskGraphRewriter.rewrite, NodeRoot  │
    │ LK-TASK-BUILD-MISSING        │ TaskGraphRewriter.rewrite            │
    │ LK-TASK-DUPLICATE            │ Tasks.add_task                       │
    ├──────────────────────────────┼──────────────────────────────────────┤
    │ LK-NX-CONFLICTING-OPTIONS    │ nx.add_nx_dependency                 │
    ├──────────────────────────────┼──────────────────────────────────────┤
    │ LK-FILE-OPERATION-FAILED     │ fileops (clean/copy/move)            │
    └──────────────────────────────┴──────────────────────────────────────┘

Usage::

    from lernakit.errors import LernaKitError, E

    raise LernaKitError(
        code=E.SUBPROJECT_DUPLICATE_PATH,
        message='A sub project is defined with the same output path',
        hint='Give each sub-project its own outdir.',
    )
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from rich.console import Console
from rich.markup import escape as rich_escape


class ErrorCode(str, Enum):
    """Enumeration of all lernakit diagnostic codes."""

    # Configuration
    CONFIG_NOT_FOUND = 'LK-CONFIG-NOT-FOUND'
    CONFIG_PARSE_ERROR = 'LK-CONFIG-PARSE-ERROR'
    CONFIG_INVALID_KEY = 'LK-CONFIG-INVALID-KEY'
    CONFIG_INVALID_VALUE = 'LK-CONFIG-INVALID-VALUE'
    DEPRECATED_OPTION = 'LK-CONFIG-DEPRECATED-OPTION'

    # Sub-project registration
    SUBPROJECT_OUTSIDE_ROOT = 'LK-SUBPROJECT-OUTSIDE-ROOT'
    SUBPROJECT_DUPLICATE_PATH = 'LK-SUBPROJECT-DUPLICATE-PATH'

    # Task graph
    DEFAULT_TASK_MISSING = 'LK-TASK-DEFAULT-MISSING'
    BUILD_TASK_MISSING = 'LK-TASK-BUILD-MISSING'
    TASK_DUPLICATE = 'LK-TASK-DUPLICATE'

    # Nx annotations
    NX_CONFLICTING_OPTIONS = 'LK-NX-CONFLICTING-OPTIONS'

    # File helpers
    FILE_OPERATION_FAILED = 'LK-FILE-OPERATION-FAILED'


E = ErrorCode


@dataclass(frozen=True)
class ErrorInfo:
    """Metadata for a single error code.

    Attributes:
        code: The ``LK-NAMED-KEY`` error code.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    code: ErrorCode
    message: str
    hint: str = ''


class LernaKitError(Exception):
    """Base exception for all lernakit errors.

    Args:
        code: The error code from :class:`ErrorCode`.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    def __init__(self, code: ErrorCode, message: str, hint: str = '') -> None:
        """Initialize with an error code, message, and optional hint."""
        self.info = ErrorInfo(code=code, message=message, hint=hint)
        super().__init__(f'[{code.value}] {message}')

    @property
    def code(self) -> ErrorCode:
        """The error code."""
        return self.info.code

    @property
    def hint(self) -> str:
        """Suggestion for fixing this error, or empty string."""
        return self.info.hint


class LernaKitWarning(UserWarning):
    """Base warning for all lernakit warnings.

    Same structure as :class:`LernaKitError` but emitted via
    :func:`warnings.warn` instead of being raised.
    """

    def __init__(self, code: ErrorCode, message: str, hint: str = '') -> None:
        """Initialize with an error code, message, and optional hint."""
        self.info = ErrorInfo(code=code, message=message, hint=hint)
        super().__init__(f'[{code.value}] {message}')

    @property
    def code(self) -> ErrorCode:
        """The error code."""
        return self.info.code

    @property
    def hint(self) -> str:
        """Suggestion for addressing this warning, or empty string."""
        return self.info.hint


ERRORS: dict[ErrorCode, ErrorInfo] = {
    E.CONFIG_NOT_FOUND: ErrorInfo(
        code=E.CONFIG_NOT_FOUND,
        message='No lernakit.toml found in the workspace root.',
        hint='Create a lernakit.toml with at least a "name" key.',
    ),
    E.SUBPROJECT_OUTSIDE_ROOT: ErrorInfo(
        code=E.SUBPROJECT_OUTSIDE_ROOT,
        message='A sub project out dir should exists within the lerna package.',
        hint='Place every sub-project in a directory below the root project outdir.',
    ),
    E.SUBPROJECT_DUPLICATE_PATH: ErrorInfo(
        code=E.SUBPROJECT_DUPLICATE_PATH,
        message='A sub project is defined with the same output path.',
        hint='Each sub-project needs a distinct outdir.',
    ),
    E.DEFAULT_TASK_MISSING: ErrorInfo(
        code=E.DEFAULT_TASK_MISSING,
        message='Could not find default task.',
        hint='The root project must define a "default" task before synthesis.',
    ),
    E.BUILD_TASK_MISSING: ErrorInfo(
        code=E.BUILD_TASK_MISSING,
        message='Could not find build task.',
        hint='The root project must define a "build" task before synthesis.',
    ),
    E.NX_CONFLICTING_OPTIONS: ErrorInfo(
        code=E.NX_CONFLICTING_OPTIONS,
        message='Task Dependency and Tasks dependency option cannot be used in conjunction.',
        hint='Move the single task_dependency entry into tasks_dependency.',
    ),
}


def explain(code: str) -> str | None:
    """Return a detailed explanation for an error code.

    Args:
        code: The error code string, e.g. ``"LK-CONFIG-NOT-FOUND"``.

    Returns:
        A formatted explanation string, or ``None`` if the code is unknown.
    """
    try:
        error_code = ErrorCode(code)
    except ValueError:
        return None

    info = ERRORS.get(error_code)
    if info is None:
        return f'{code}: No detailed explanation available.'

    lines = [f'{code}: {info.message}']
    if info.hint:
        lines.append(f'  Hint: {info.hint}')
    return '\n'.join(lines)


def render_error(exc: LernaKitError, *, file: TextIO | None = None) -> None:
    """Render an error in Rust-compiler style with color.

    Output format::

        error[LK-SUBPROJECT-OUTSIDE-ROOT]: A sub project out dir ...
          |
          = hint: Place every sub-project in a directory below ...

    Args:
        exc: The error to render.
        file: Output stream (defaults to ``sys.stderr``).
    """
    out = file or sys.stderr
    code, message, hint = exc.code.value, exc.info.message, exc.hint
    if out.isatty():
        console = Console(file=out, highlight=False)
        console.print(f'[bold red]error\\[{code}][/bold red][bold]: {rich_escape(message)}[/bold]')
        if hint:
            console.print('  [dim]|[/dim]')
            console.print(f'  [dim]=[/dim] [cyan]hint[/cyan]: {rich_escape(hint)}')
        console.print()
        return
    print(f'error[{code}]: {message}', file=out)  # noqa: T201 - CLI output
    if hint:
        print('  |', file=out)  # noqa: T201 - CLI output
        print(f'  = hint: {hint}', file=out)  # noqa: T201 - CLI output
    print(file=out)  # noqa: T201 - CLI output


__all__ = [
    'E',
    'ERRORS',
    'ErrorCode',
    'ErrorInfo',
    'LernaKitError',
    'LernaKitWarning',
    'explain',
    'render_error',
]
