# installer/git_installer.py
# -*- coding: utf-8 -*-
"""
Installs the Git version-control client.
"""

import logging
from typing import Optional

from common.debian.apt_manager import AptManager
from installer.verification import verify_command
from provisioner.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def install_git(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    AptManager(logger=logger_to_use).install(
        app_settings.git.package, app_settings
    )


def verify_git(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    verify_command(
        ["git", "--version"],
        "Git installation failed",
        app_settings,
        current_logger=current_logger,
    )
