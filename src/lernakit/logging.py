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

"""Structured logging for lernakit.

The helper commands run as steps of generated tasks, often once per
member package and interleaved by ``lerna run --stream``. Every event
therefore goes to stderr, and a CLI run binds the command name and the
working directory so lines from different members can be told apart::

    2026-01-01T00:00:00Z [info] dist_copied  command=copy-dist cwd=/repo ...

``--json-log`` switches to one JSON object per line.

Usage::

    from lernakit.logging import bind_command, configure_logging, get_logger

    configure_logging(verbose=True)
    bind_command('copy-dist')
    get_logger(__name__).info('dist_copied', entries=3)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

import structlog


def _level(*, verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.WARNING
    if verbose:
        return logging.DEBUG
    return logging.INFO


def _renderer(*, json_log: bool, stream: TextIO) -> structlog.types.Processor:
    if json_log:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_log: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Call once at startup. ``quiet`` wins over ``verbose``.

    Args:
        verbose: Enable debug-level output.
        quiet: Only warnings and errors.
        json_log: JSON lines instead of console output.
        stream: Destination, ``sys.stderr`` by default.
    """
    out = stream if stream is not None else sys.stderr
    logging.basicConfig(format='%(message)s', stream=out, level=_level(verbose=verbose, quiet=quiet), force=True)

    structlog.contextvars.clear_contextvars()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt='iso'),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(json_log=json_log, stream=out),
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def bind_command(command: str) -> None:
    """Attach the running command and working directory to every event."""
    structlog.contextvars.bind_contextvars(command=command, cwd=os.getcwd())


def get_logger(name: str = 'lernakit') -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger named ``name``."""
    return structlog.get_logger(name)


__all__ = [
    'bind_command',
    'configure_logging',
    'get_logger',
]
