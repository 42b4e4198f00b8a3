"""Test file sink level filtering and formatting."""

import re

import pytest

from mergedown.core.log import ConsoleSink, FileSink, setup_logger


@pytest.fixture
def file_logger(tmp_path):
    """Return a factory for a file-only logger writing to tmp_path."""

    def _make(**sink):
        log_file = tmp_path / "mergedown.log"
        logger = setup_logger(
            log_root=tmp_path,
            run_name="test",
            console=ConsoleSink(enabled=False),
            file=FileSink(enabled=True, path=str(log_file), **sink),
        )
        return logger, log_file

    yield _make

    # Restore console-only logging for later tests
    setup_logger(
        log_root=tmp_path,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


def test_debug_level_includes_everything(file_logger):
    logger, log_file = file_logger(level="debug")

    logger.debug("DEBUG message")
    logger.info("INFO message")
    logger.error("ERROR message")
    logger.close()

    content = log_file.read_text()
    assert "DEBUG message" in content
    assert "INFO message" in content
    assert "ERROR message" in content


def test_info_level_filters_debug(file_logger):
    logger, log_file = file_logger(level="info")

    logger.debug("DEBUG message - should be filtered")
    logger.info("INFO message - should be included")
    logger.warn("WARN message - should be included")
    logger.close()

    content = log_file.read_text()
    assert "DEBUG message" not in content
    assert "INFO message" in content
    assert "WARN message" in content


def test_error_level_filters_warn(file_logger):
    logger, log_file = file_logger(level="error")

    logger.info("INFO message")
    logger.warn("WARN message")
    logger.error("ERROR message")
    logger.close()

    content = log_file.read_text()
    assert "INFO message" not in content
    assert "WARN message" not in content
    assert "ERROR message" in content


def test_default_line_format(file_logger):
    logger, log_file = file_logger(level="info")

    logger.warn("Merge conflict")
    logger.close()

    line = log_file.read_text().strip()
    assert re.fullmatch(
        r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} \[warn\] Merge conflict",
        line,
    )


def test_sink_inherits_logger_level(tmp_path):
    logger = setup_logger(
        log_root=tmp_path,
        run_name="test",
        level="error",
        console=ConsoleSink(enabled=False),
    )
    try:
        assert logger.console.level == "error"
        assert logger.file.level == "error"
    finally:
        setup_logger(
            log_root=tmp_path,
            run_name="test",
            console=ConsoleSink(level="debug"),
        )


def test_default_path_uses_log_root_and_run_name(tmp_path):
    logger = setup_logger(
        log_root=tmp_path,
        run_name="widgets-main",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True),
    )
    logger.info("hello")
    logger.close()

    log_file = tmp_path / "widgets-main" / "mergedown.log"
    assert "hello" in log_file.read_text()

    setup_logger(
        log_root=tmp_path,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )
