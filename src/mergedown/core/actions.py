"""Outputs and failure status for the GitHub Actions runner.

Outputs go to the file named by GITHUB_OUTPUT, as the runner
expects. Outside a runner (no GITHUB_OUTPUT) the legacy
``::set-output`` workflow command is printed instead, which is
also handy when running locally.
"""

from __future__ import annotations

import os
import sys
import uuid
from pathlib import Path
from typing import TextIO

from mergedown.core.log import logger


def _escape_data(value: str) -> str:
    return (
        value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    )


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


class ActionsReporter:
    """Collects the outputs and failure status of one run."""

    def __init__(
        self,
        output_file: Path | None = None,
        stream: TextIO | None = None,
    ):
        """Initialize reporter.

        Args:
            output_file: Path from GITHUB_OUTPUT, or None to print
                workflow commands instead
            stream: Where workflow commands are written
                (default: stdout)
        """
        self.output_file = output_file
        self.stream = stream if stream is not None else sys.stdout
        self.outputs: dict[str, str] = {}
        self.failures: list[str] = []

    @classmethod
    def from_environment(cls) -> ActionsReporter:
        output_file = os.environ.get("GITHUB_OUTPUT", "").strip()
        return cls(output_file=Path(output_file) if output_file else None)

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def _command(self, command: str, message: str, **properties: str):
        props = ",".join(
            f"{key}={_escape_property(value)}"
            for key, value in properties.items()
        )
        head = f"::{command} {props}" if props else f"::{command}"
        self.stream.write(f"{head}::{_escape_data(message)}\n")
        self.stream.flush()

    def set_output(self, name: str, value: str) -> None:
        """Record an output value for later workflow steps."""
        self.outputs[name] = value
        logger.debug(f"Output {name}={value}")

        if self.output_file is None:
            self._command("set-output", value, name=name)
            return

        if "\n" in value or "\r" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            entry = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
        else:
            entry = f"{name}={value}\n"

        with open(self.output_file, "a", encoding="utf-8") as f:
            f.write(entry)

    def set_failed(self, message: str) -> None:
        """Mark the run as failed and annotate the job with message."""
        self.failures.append(message)
        self._command("error", message)


__all__ = ["ActionsReporter"]
