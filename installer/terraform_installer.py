# installer/terraform_installer.py
# -*- coding: utf-8 -*-
"""
Installs Terraform from the HashiCorp apt repository.
"""

import logging
from typing import Optional

from common.command_utils import log_provision
from common.debian.apt_manager import AptManager
from installer.vendor_repository import register_vendor_repository
from installer.verification import verify_command
from provisioner.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def install_terraform(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Installs the repository prerequisites, registers the HashiCorp
    repository for the host's codename and installs Terraform.

    Raises:
        subprocess.CalledProcessError: If an apt or gpg command fails.
        CommandFailedError: If the signing key cannot be downloaded.
        EnvironmentError: If the OS codename cannot be determined.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    terraform_cfg = app_settings.terraform

    apt_manager = AptManager(logger=logger_to_use)
    apt_manager.install(list(terraform_cfg.prerequisite_packages), app_settings)
    register_vendor_repository(
        terraform_cfg, apt_manager, app_settings, logger_to_use
    )

    log_provision(
        f"{symbols.get('package', '📦')} Installing {terraform_cfg.package}...",
        "info",
        logger_to_use,
        app_settings,
    )
    apt_manager.install(terraform_cfg.package, app_settings)


def verify_terraform(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    verify_command(
        ["terraform", "--version"],
        "Terraform installation failed",
        app_settings,
        current_logger=current_logger,
    )
