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

"""Command-line interface for lernakit.

The file commands are what the generated task steps call; ``synth``
writes a workspace from ``lernakit.toml``.

Usage::

    # Empty dist/ but keep changelog.md, version.txt, releasetag.txt:
    lernakit clean-dist dist

    # Copy a member's artifacts into the root artifacts directory:
    lernakit copy-dist packages/core/dist dist

    # Move a member's docs under the root docs directory:
    lernakit move-docs docs packages/core docs

    # Synthesize the workspace described by lernakit.toml:
    lernakit synth --workspace-root .

    # Explain an error:
    lernakit explain LK-SUBPROJECT-OUTSIDE-ROOT
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from rich_argparse import RichHelpFormatter

from lernakit import __version__
from lernakit.config import load_config
from lernakit.errors import LernaKitError, explain, render_error
from lernakit.fileops import clean_dist, copy_dist, move_docs
from lernakit.lerna import build_workspace
from lernakit.logging import bind_command, configure_logging, get_logger

logger = get_logger(__name__)


async def _cmd_clean_dist(args: argparse.Namespace) -> int:
    """Handle the ``clean-dist`` subcommand."""
    await clean_dist(Path(args.dist_folder))
    return 0


async def _cmd_copy_dist(args: argparse.Namespace) -> int:
    """Handle the ``copy-dist`` subcommand."""
    await copy_dist(Path(args.subproject_dist), Path(args.parent_dist))
    return 0


async def _cmd_move_docs(args: argparse.Namespace) -> int:
    """Handle the ``move-docs`` subcommand."""
    await move_docs(Path(args.parent_docs), args.subproject_path, args.subproject_docs)
    return 0


def _cmd_synth(args: argparse.Namespace) -> int:
    """Handle the ``synth`` subcommand."""
    root = Path(args.workspace_root).resolve()
    options = load_config(root)
    workspace = build_workspace(options)
    written = workspace.synth()
    for path in written:
        print(path.relative_to(root).as_posix())  # noqa: T201 - CLI output
    return 0


def _cmd_explain(args: argparse.Namespace) -> int:
    """Handle the ``explain`` subcommand."""
    result = explain(args.code)
    if result is None:
        print(f'Unknown error code: {args.code}')  # noqa: T201 - CLI output
        return 1
    print(result)  # noqa: T201 - CLI output
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    Returns:
        Configured :class:`argparse.ArgumentParser`.
    """
    RichHelpFormatter.styles['argparse.groups'] = 'bold yellow'
    parser = argparse.ArgumentParser(
        prog='lernakit',
        description='Lerna workspace synthesis and task helpers.',
        formatter_class=RichHelpFormatter,
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}',
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging.')
    parser.add_argument('--quiet', '-q', action='store_true', help='Only log warnings and errors.')
    parser.add_argument('--json-log', action='store_true', help='Emit logs as JSON lines.')

    subparsers = parser.add_subparsers(dest='command')

    clean_parser = subparsers.add_parser(
        'clean-dist',
        help='Empty an artifacts directory, keeping release metadata files.',
        formatter_class=RichHelpFormatter,
    )
    clean_parser.add_argument('dist_folder', metavar='DIST_FOLDER', help='Artifacts directory to clean.')

    copy_parser = subparsers.add_parser(
        'copy-dist',
        help="Copy a member's artifacts into the root artifacts directory.",
        formatter_class=RichHelpFormatter,
    )
    copy_parser.add_argument('subproject_dist', metavar='SUBPROJECT_DIST', help="Member's artifacts directory.")
    copy_parser.add_argument('parent_dist', metavar='PARENT_DIST', help='Root artifacts directory.')

    move_parser = subparsers.add_parser(
        'move-docs',
        help="Move a member's docs under the root docs directory.",
        formatter_class=RichHelpFormatter,
    )
    move_parser.add_argument('parent_docs', metavar='PARENT_DOCS', help='Root docs directory.')
    move_parser.add_argument('subproject_path', metavar='SUBPROJECT_PATH', help='Member path.')
    move_parser.add_argument(
        'subproject_docs',
        metavar='SUBPROJECT_DOCS',
        help="Member's docs directory, relative to the member.",
    )

    synth_parser = subparsers.add_parser(
        'synth',
        help='Write the workspace described by lernakit.toml.',
        formatter_class=RichHelpFormatter,
    )
    synth_parser.add_argument(
        '--workspace-root',
        default='.',
        help='Directory containing lernakit.toml (default: current directory).',
    )

    explain_parser = subparsers.add_parser(
        'explain',
        help='Explain an error code.',
        formatter_class=RichHelpFormatter,
    )
    explain_parser.add_argument('code', help='Error code, e.g. LK-CONFIG-NOT-FOUND.')

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)
    if args.command:
        bind_command(args.command)

    try:
        command = args.command
        if command == 'clean-dist':
            return asyncio.run(_cmd_clean_dist(args))
        if command == 'copy-dist':
            return asyncio.run(_cmd_copy_dist(args))
        if command == 'move-docs':
            return asyncio.run(_cmd_move_docs(args))
        if command == 'synth':
            return _cmd_synth(args)
        if command == 'explain':
            return _cmd_explain(args)

        parser.print_help()  # noqa: T201 - CLI output
        print(  # noqa: T201 - CLI output
            f'\n{parser.prog}: error: please provide a command',
            file=sys.stderr,
        )
        return 2

    except LernaKitError as exc:
        render_error(exc)
        return 1
    except KeyboardInterrupt:
        logger.info('interrupted')
        return 130


def _main() -> None:
    """Wrapper for pyproject.toml [project.scripts] entry point."""
    sys.exit(main())


__all__ = [
    'build_parser',
    'main',
]
