# tests/conftest.py
import logging
from unittest.mock import MagicMock

import pytest

from provisioner.config_models import AppSettings


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces the root handlers; put the originals back."""
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if handler not in saved_handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in saved_handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(saved_level)


@pytest.fixture
def app_settings(tmp_path):
    """Real settings with the transcript and install root under tmp_path."""
    return AppSettings(
        install_root=tmp_path / "opt",
        log_file=tmp_path / "setup.log",
    )


@pytest.fixture
def mock_logger():
    return MagicMock(spec=logging.Logger)

