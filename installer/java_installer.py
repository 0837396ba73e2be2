# installer/java_installer.py
# -*- coding: utf-8 -*-
"""
Installs the Java runtime required by Jenkins, Maven and SonarQube.
"""

import logging
from typing import Optional

from common.command_utils import log_provision
from common.debian.apt_manager import AptManager
from installer.verification import verify_command
from provisioner.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def install_java(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """Install the configured JDK package."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    package = app_settings.java.package

    log_provision(
        f"{symbols.get('package', '📦')} Installing {package}...",
        "info",
        logger_to_use,
        app_settings,
    )
    AptManager(logger=logger_to_use).install(package, app_settings)


def verify_java(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    verify_command(
        ["java", "-version"],
        "Java installation failed",
        app_settings,
        current_logger=current_logger,
    )
