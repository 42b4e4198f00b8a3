"""Logfire-backed logger with console and file sinks."""

from __future__ import annotations

import contextlib
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import logfire
from opentelemetry.proto.logs.v1 import logs_pb2
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
    SpanExportResult,
)
from pydantic import Field, PrivateAttr, model_validator

from mergedown.core.base import BaseConfig

# OpenTelemetry severity numbers for the level names we accept.
LEVELS = {
    "debug": logs_pb2.SEVERITY_NUMBER_DEBUG,
    "info": logs_pb2.SEVERITY_NUMBER_INFO,
    "warn": logs_pb2.SEVERITY_NUMBER_WARN,
    "error": logs_pb2.SEVERITY_NUMBER_ERROR,
    "fatal": logs_pb2.SEVERITY_NUMBER_FATAL,
}

# Private storage for the installed logger instance
_current_logger: Logger | None = None


class _LoggerProxy:
    """Module-level stand-in for the current Logger.

    Every attribute is looked up on the logger installed by
    setup_logger(). Before that happens, calls are silently
    dropped so importing modules never need to care about
    initialization order.
    """

    def __getattr__(self, name):
        if _current_logger is None:
            def _noop(*args, **kwargs):  # noqa: ARG001
                return contextlib.nullcontext()
            return _noop
        return getattr(_current_logger, name)

    def __enter__(self):
        """Enter the installed logger, if any."""
        if _current_logger is None:
            return self
        return _current_logger.__enter__()

    def __exit__(self, *args):
        """Close the installed logger, if any."""
        if _current_logger is None:
            return False
        return _current_logger.__exit__(*args)


# Module-level logger, imported everywhere
logger = _LoggerProxy()


# ============================================================
# EXPORTERS
# ============================================================

def _level_name(level_num: int) -> str:
    for name in ("fatal", "error", "warn", "info", "debug"):
        if level_num >= LEVELS[name]:
            return name
    return "debug"


class LevelFilteringExporter(SpanExporter):
    """Forward only spans at or above a minimum level."""

    def __init__(self, exporter: SpanExporter, min_level: str):
        """Initialize filtering exporter.

        Args:
            exporter: Exporter that receives the kept spans
            min_level: Lowest level name to keep (default info when
                the name is unknown)
        """
        self._exporter = exporter
        self._min_severity = LEVELS.get(
            min_level.lower(), logs_pb2.SEVERITY_NUMBER_INFO
        )

    def export(self, spans: list[ReadableSpan]) -> SpanExportResult:
        """Export spans at or above the threshold."""
        kept = [
            span for span in spans
            if (span.attributes or {}).get(
                "logfire.level_num", logs_pb2.SEVERITY_NUMBER_INFO
            ) >= self._min_severity
        ]
        if kept:
            return self._exporter.export(kept)
        return SpanExportResult.SUCCESS

    def shutdown(self) -> None:
        """Shutdown underlying exporter."""
        self._exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        """Force flush underlying exporter."""
        return self._exporter.force_flush(timeout_millis)


# ============================================================
# SINKS
# ============================================================

class Sink(BaseConfig):
    """Base class for a log destination.

    Sinks are configuration models; create_processor() turns one
    into an OpenTelemetry span processor at setup time.
    """

    enabled: bool = Field(default=True, description="Enable this sink")
    level: str | None = Field(
        default=None,
        description=(
            "Minimum level for this sink (debug, info, warn, error). "
            "Inherits Logger.level when unset."
        ),
    )

    _processor: Any = PrivateAttr(default=None)

    def create_processor(self, log_root: Path, run_name: str):
        """Return a span processor for this sink, or None."""
        return None

    def close(self):
        """Shut down this sink's processor."""
        if self._processor:
            with contextlib.suppress(Exception):
                self._processor.shutdown()


class ConsoleSink(Sink):
    """Console output, rendered by logfire itself."""

    verbose: bool = Field(
        default=False, description="Show span attributes on console"
    )
    colors: str = Field(
        default="auto", description="Color mode: auto, always, never"
    )


class FileSink(Sink):
    """Formatted log lines appended to a file."""

    enabled: bool = Field(default=False, description="Enable file logging")
    path: str = Field(
        default="{log_root}/{run_name}/mergedown.log",
        description="Log file path template",
    )
    format_template: str = Field(
        default="{timestamp:%Y-%m-%d %H:%M:%S} [{level}] {message}",
        description=(
            "Line template; fields: timestamp, level, message, location"
        ),
    )

    _file: Any = PrivateAttr(default=None)

    def format_span(self, span: ReadableSpan) -> str:
        """Render one span as a log line using format_template."""
        attrs = span.attributes or {}
        filepath = attrs.get("code.filepath", "")
        lineno = attrs.get("code.lineno", "")
        data = {
            "timestamp": datetime.fromtimestamp(
                span.start_time / 1e9, tz=UTC
            ),
            "level": _level_name(
                attrs.get(
                    "logfire.level_num", logs_pb2.SEVERITY_NUMBER_INFO
                )
            ),
            "message": attrs.get("logfire.msg", span.name),
            "location": f"{filepath}:{lineno}" if filepath else "",
        }
        try:
            return self.format_template.format(**data) + "\n"
        except KeyError as e:
            return f"ERROR: Invalid template field {e}\n"

    def create_processor(self, log_root: Path, run_name: str):
        """Open the log file and return a batching processor for it."""
        log_path = Path(
            self.path.format(log_root=log_root, run_name=run_name)
        )
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # Line buffered, stays open for the lifetime of the sink
        self._file = open(log_path, "a", buffering=1, encoding="utf-8")  # noqa: SIM115

        exporter = ConsoleSpanExporter(
            out=self._file, formatter=self.format_span
        )
        return BatchSpanProcessor(
            LevelFilteringExporter(exporter, self.level or "info")
        )

    def close(self):
        """Close processor first, then the file.

        Pending spans are flushed before the file is closed.
        """
        super().close()
        if self._file and not self._file.closed:
            self._file.close()


# ============================================================
# LOGGER
# ============================================================

class Logger(BaseConfig):
    """Logger with console and file sinks.

    Holds the sink configuration and, once setup() has run,
    forwards log calls to logfire.
    """

    level: str = Field(
        default="info",
        description="Default level for sinks that do not set one",
    )
    console: ConsoleSink = Field(default_factory=ConsoleSink)
    file: FileSink = Field(default_factory=FileSink)

    @model_validator(mode="after")
    def _cascade_level(self) -> Logger:
        """Give sinks without their own level the logger's level."""
        for sink in (self.console, self.file):
            if sink.level is None:
                sink.level = self.level
        return self

    def setup(self, log_root: Path, run_name: str):
        """Create sink processors and configure logfire."""
        processors = []
        if self.file.enabled:
            self.file._processor = self.file.create_processor(
                log_root, run_name
            )
            processors.append(self.file._processor)

        console = (
            logfire.ConsoleOptions(
                min_log_level=self.console.level,
                verbose=self.console.verbose,
                colors=self.console.colors,
                include_timestamps=True,
            )
            if self.console.enabled
            else False
        )

        logfire.configure(
            service_name="mergedown",
            send_to_logfire=False,
            console=console,
            additional_span_processors=processors or None,
        )

    def debug(self, msg: str, **kwargs):
        """Log debug message."""
        logfire.debug(msg, **kwargs)

    def info(self, msg: str, **kwargs):
        """Log info message."""
        logfire.info(msg, **kwargs)

    def warn(self, msg: str, **kwargs):
        """Log warning message."""
        logfire.warn(msg, **kwargs)

    warning = warn

    def error(self, msg: str, **kwargs):
        """Log error message."""
        logfire.error(msg, **kwargs)

    def span(self, msg: str, **kwargs):
        """Span context manager around a unit of work."""
        return logfire.span(msg, **kwargs)


# ============================================================
# GLOBAL LOGGER SETUP
# ============================================================

def setup_logger(
    log_root: Path,
    run_name: str,
    level: str = "info",
    console: ConsoleSink | None = None,
    file: FileSink | None = None,
) -> Logger:
    """Build, configure and install the global logger.

    Config calls this once it has validated. Tests call it
    directly to get a console-only or file-only logger.
    """
    global _current_logger

    if _current_logger is not None:
        _current_logger.close()

    _current_logger = Logger(
        level=level,
        console=console or ConsoleSink(),
        file=file or FileSink(),
    )
    _current_logger.setup(log_root, run_name)
    return _current_logger