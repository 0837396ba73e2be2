# installer/ansible_installer.py
# -*- coding: utf-8 -*-
"""
Installs Ansible system-wide with pip.
"""

import logging
from typing import Optional

from common.command_utils import log_provision, run_elevated_command
from common.debian.apt_manager import AptManager
from installer.verification import verify_command
from provisioner.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def install_ansible(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Installs pip from apt, then the Ansible distribution with pip.

    Raises:
        subprocess.CalledProcessError: If apt-get or pip fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    ansible_cfg = app_settings.ansible

    AptManager(logger=logger_to_use).install(
        list(ansible_cfg.prerequisite_packages), app_settings
    )
    log_provision(
        f"{symbols.get('package', '📦')} Installing {ansible_cfg.pip_package} with {ansible_cfg.pip_command}...",
        "info",
        logger_to_use,
        app_settings,
    )
    run_elevated_command(
        [ansible_cfg.pip_command, "install", ansible_cfg.pip_package],
        app_settings,
        current_logger=logger_to_use,
    )


def verify_ansible(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    verify_command(
        ["ansible", "--version"],
        "Ansible installation failed",
        app_settings,
        current_logger=current_logger,
    )
