# installer/system_packages.py
# -*- coding: utf-8 -*-
"""
Refreshes package indexes and upgrades the installed system packages.
"""

import logging
from typing import Optional

from common.command_utils import log_provision
from common.debian.apt_manager import AptManager
from provisioner.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def update_system_packages(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Runs ``apt-get update`` followed by ``apt-get upgrade``.

    Raises:
        subprocess.CalledProcessError: If either command fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols

    apt_manager = AptManager(logger=logger_to_use)
    apt_manager.update(app_settings)
    apt_manager.upgrade(app_settings)

    log_provision(
        f"{symbols.get('success', '✅')} System packages are up to date.",
        "success",
        logger_to_use,
        app_settings,
    )
