"""Tests for the command layer: logging setup and exit code mapping."""

import logging

import pytest
import typer
from rich.logging import RichHandler

from chappecli.commands import run_command
from chappecli.commands.utils import console, setup_logging

from conftest import FakePipeline


@pytest.fixture
def cli_logger():
    logger = logging.getLogger("chappecli")
    saved = (logger.level, list(logger.handlers), logger.propagate)
    yield logger
    level, handlers, propagate = saved
    logger.setLevel(level)
    logger.handlers = handlers
    logger.propagate = propagate


# =============================================================================
# setup_logging
# =============================================================================


class TestSetupLogging:
    def test_warning_by_default(self, cli_logger, monkeypatch):
        monkeypatch.delenv("CHAPPE_DEBUG", raising=False)
        setup_logging()
        assert cli_logger.level == logging.WARNING

    def test_verbose_is_info(self, cli_logger, monkeypatch):
        monkeypatch.delenv("CHAPPE_DEBUG", raising=False)
        setup_logging(verbose=True)
        assert cli_logger.level == logging.INFO

    def test_debug_env_var_wins(self, cli_logger, monkeypatch):
        monkeypatch.setenv("CHAPPE_DEBUG", "1")
        setup_logging(verbose=False)
        assert cli_logger.level == logging.DEBUG

    def test_single_rich_handler_on_shared_console(self, cli_logger, monkeypatch):
        monkeypatch.delenv("CHAPPE_DEBUG", raising=False)
        setup_logging()
        setup_logging(verbose=True)

        assert len(cli_logger.handlers) == 1
        handler = cli_logger.handlers[0]
        assert isinstance(handler, RichHandler)
        assert handler.console is console
        assert cli_logger.propagate is False


# =============================================================================
# run_command
# =============================================================================


class TestRunCommand:
    @pytest.fixture(autouse=True)
    def in_project(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

    def test_success_exits_0(self):
        with pytest.raises(typer.Exit) as exc_info:
            run_command([], {}, quiet=True, pipeline=FakePipeline())
        assert exc_info.value.exit_code == 0

    def test_keyboard_interrupt_exits_130(self):
        pipeline = FakePipeline(outcome="interrupt")

        with pytest.raises(typer.Exit) as exc_info:
            run_command(["watch"], {}, quiet=True, pipeline=pipeline)

        assert exc_info.value.exit_code == 130
        assert pipeline.calls == ["watch"]
