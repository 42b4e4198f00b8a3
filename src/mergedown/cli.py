#!/usr/bin/env python3
"""mergedown CLI - keep a branch merged down via the GitHub API."""

import asyncio
import sys

from pydantic import ValidationError
from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from mergedown.command.merge import MergeCommand
from mergedown.core.actions import ActionsReporter
from mergedown.core.config import State
from mergedown.core.log import logger
from mergedown.core.result import FAILED


class CliState(State):
    """Merge one branch into another through the GitHub API.

    On conflict a recovery branch <head>_sync_<DD_MM_YYYY> is
    pointed at head's latest commit and the run fails so the
    conflict can be resolved by hand.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.git.base develop)
    2. GitHub Actions inputs (INPUT_BASE, INPUT_HEAD,
       INPUT_GITHUB_TOKEN) and GITHUB_REPOSITORY
    3. mergedown.yaml in the current directory
    4. .env file for secrets
    5. Environment variables
       (MERGEDOWN_CONFIG__GIT__BASE=develop)
    """

    merge: CliSubCommand[MergeCommand]

    def cli_cmd(self):
        """Run the merge subcommand (the default when none is given)."""
        subcommand = get_subcommand(self, is_required=False)
        if subcommand is None:
            subcommand = MergeCommand()

        # Closes the log file sink on the way out
        with logger:
            exit_code = asyncio.run(subcommand.run_workflow(self))
            raise SystemExit(exit_code)


def main(argv: list[str] | None = None):
    """Main entry point for CLI."""
    try:
        CliApp.run(CliState, cli_args=argv)
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        reporter = ActionsReporter.from_environment()
        reporter.set_output("result", FAILED)
        reporter.set_failed(
            f"Invalid configuration ({e.error_count()} errors)"
        )
        raise SystemExit(reporter.exit_code) from e


if __name__ == "__main__":
    main()
