"""Tests for the close() cascade through BaseCloseable."""

import pytest

from mergedown.core.base import BaseConfig
from mergedown.core.log import ConsoleSink, FileSink, Logger, setup_logger


@pytest.fixture(autouse=True)
def restore_console_logger(tmp_path):
    yield
    setup_logger(
        log_root=tmp_path,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


def file_only_logger(tmp_path):
    logger = Logger(
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, path=str(tmp_path / "test.log")),
    )
    logger.setup(log_root=tmp_path, run_name="test")
    return logger


def test_context_manager_closes_log_file(tmp_path):
    logger = file_only_logger(tmp_path)
    assert not logger.file._file.closed

    with logger:
        logger.info("test message")

    assert logger.file._file.closed
    assert "test message" in (tmp_path / "test.log").read_text()


def test_log_file_closed_on_exception(tmp_path):
    logger = file_only_logger(tmp_path)

    with pytest.raises(ValueError), logger:
        raise ValueError("boom")

    assert logger.file._file.closed


def test_config_close_reaches_file_sink(tmp_path):
    from mergedown.core.config import Config

    config = Config(
        git={"base": "develop", "head": "main", "owner": "o", "repo": "r"},
        github={"token": "t"},
        log_root=tmp_path,
        logger={
            "console": {"enabled": False},
            "file": {"enabled": True},
        },
    )
    log_file = tmp_path / "r-main" / "mergedown.log"
    assert config.logger.file._file is not None

    config.close()

    assert config.logger.file._file.closed
    assert log_file.exists()


def test_failing_child_does_not_stop_others(capsys):
    closed = []

    class Broken:
        def close(self):
            raise RuntimeError("cannot close")

    class Fine:
        def close(self):
            closed.append(True)

    class Parent(BaseConfig):
        model_config = {"arbitrary_types_allowed": True}

        first: Broken
        second: Fine

    Parent(first=Broken(), second=Fine()).close()

    assert closed == [True]
    assert "cannot close" in capsys.readouterr().err
