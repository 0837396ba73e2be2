import io
import logging
import sys

import pytest

from common.core_utils import (
    ANSI_BOLD_BLUE,
    ANSI_BOLD_RED,
    ANSI_RESET,
    MaxLevelFilter,
    SymbolFormatter,
    setup_logging,
)


def _record(level, msg="hello", **extra):
    record = logging.LogRecord("test", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_symbol_formatter_adds_level_symbol():
    formatter = SymbolFormatter(fmt="%(symbol)s %(message)s")

    assert formatter.format(_record(logging.ERROR)) == "❌ hello"
    assert formatter.format(_record(logging.WARNING)) == "⚠️ hello"


def test_symbol_formatter_colors_errors_and_banners():
    formatter = SymbolFormatter(fmt="%(message)s", use_color=True)

    assert formatter.format(_record(logging.ERROR)) == f"{ANSI_BOLD_RED}hello{ANSI_RESET}"
    assert (
        formatter.format(_record(logging.INFO, banner=True))
        == f"\n{ANSI_BOLD_BLUE}hello{ANSI_RESET}"
    )
    assert formatter.format(_record(logging.INFO)) == "hello"


def test_symbol_formatter_without_color_leaves_banner_plain():
    formatter = SymbolFormatter(fmt="%(message)s")

    assert formatter.format(_record(logging.INFO, banner=True)) == "hello"


def test_max_level_filter():
    level_filter = MaxLevelFilter(logging.ERROR)

    assert level_filter.filter(_record(logging.WARNING)) is True
    assert level_filter.filter(_record(logging.ERROR)) is False


def test_setup_logging_appends_to_transcript(tmp_path):
    log_file = tmp_path / "logs" / "setup.log"
    log_file.parent.mkdir()
    log_file.write_text("previous run\n", encoding="utf-8")

    setup_logging(log_file=str(log_file), log_to_console=False, log_prefix="[CI-HOST]")
    logging.getLogger("test").info("new run")
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = log_file.read_text(encoding="utf-8")
    assert content.startswith("previous run\n")
    assert "[CI-HOST]" in content
    assert "new run" in content
    assert "\033[" not in content


def test_setup_logging_splits_console_streams(mocker):
    fake_stdout = io.StringIO()
    fake_stderr = io.StringIO()
    mocker.patch.object(sys, "stdout", fake_stdout)
    mocker.patch.object(sys, "stderr", fake_stderr)

    setup_logging(log_file=None, log_to_console=True)
    test_logger = logging.getLogger("split")
    test_logger.info("progress line")
    test_logger.error("failure line")

    assert "progress line" in fake_stdout.getvalue()
    assert "failure line" not in fake_stdout.getvalue()
    assert "failure line" in fake_stderr.getvalue()
    assert "\033[" not in fake_stderr.getvalue()


def test_setup_logging_replaces_existing_handlers():
    root_logger = logging.getLogger()
    stale_handler = logging.NullHandler()
    root_logger.addHandler(stale_handler)

    setup_logging(log_file=None, log_to_console=True)

    assert stale_handler not in root_logger.handlers
    assert len(root_logger.handlers) == 2


@pytest.mark.parametrize("level", [logging.DEBUG, logging.WARNING])
def test_setup_logging_sets_root_level(level):
    setup_logging(log_level=level, log_to_console=False)

    assert logging.getLogger().level == level
