"""The :class:`CLI` root command and the process-level error boundary.

:meth:`CLI.main` is the only place that translates between engine
results and process exit codes:

* help and version requests are rendered and return ``SUCCESS``;
* engine failures (:class:`~mkly.exceptions.MklyError`) are rendered as
  diagnostics and return ``GENERAL_ERROR``;
* any exception raised by a command handler, including an ``MklyError``
  flagged ``from_handler``, propagates with its full traceback,
  annotated with the command that raised it.

:meth:`CLI.run` wraps :meth:`main` for console-script use and exits the
process.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import NoReturn

from mkly.cli import exit_codes
from mkly.cli.argv import normalize_arguments
from mkly.cli.console import error_console
from mkly.cli.render import render_diagnostic, render_help, render_version
from mkly.core.command import Command
from mkly.core.models import ResolutionAction
from mkly.core.resolver import resolve
from mkly.exceptions import MklyError

logger = logging.getLogger(__name__)


class CLI(Command):
    """Root command of a command-line application.

    Parameters
    ----------
    name:
        Program name shown in usage lines and ``--version`` output.
    version:
        Version string reported by ``--version`` / ``-v``.
    """

    def __init__(self, name: str = "", version: str = "0.0.0") -> None:
        super().__init__(name)
        self._version: str = version

    def version(self, version: str) -> CLI:
        self._version = version
        return self

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def main(self, argv: Sequence[str] | None = None) -> int:
        """Resolve *argv*, dispatch, and return a process exit code.

        Parameters
        ----------
        argv:
            Explicit argument list.  When ``None`` (default), ``sys.argv``
            is normalised.  Accepting *argv* enables deterministic testing
            without monkeypatching.
        """
        args = list(argv) if argv is not None else normalize_arguments(sys.argv)

        try:
            resolution = resolve(self, args)
            if resolution.action is ResolutionAction.VERSION:
                render_version(self.name, self._version)
                return exit_codes.SUCCESS
            if resolution.action is ResolutionAction.HELP:
                render_help(resolution.command, resolution.path)
                return exit_codes.SUCCESS
            result = resolution.invoke()
        except MklyError as exc:
            if exc.from_handler:
                raise
            logger.debug("Resolution failed: %s", exc.kind)
            render_diagnostic(exc)
            return exit_codes.GENERAL_ERROR

        if isinstance(result, int) and not isinstance(result, bool):
            return result
        return exit_codes.SUCCESS

    def run(self, argv: Sequence[str] | None = None) -> NoReturn:
        """Top-level boundary for console scripts; always exits."""
        try:
            code = self.main(argv)
        except KeyboardInterrupt:
            error_console.print("\n[yellow]Aborted by user.[/yellow]")
            sys.exit(exit_codes.KEYBOARD_INTERRUPT)
        sys.exit(code)
