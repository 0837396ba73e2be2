# installer/jenkins_installer.py
# -*- coding: utf-8 -*-
"""
Handles the installation of the Jenkins CI server: repository registration,
package installation, service start and disclosure of the initial
administrator password.
"""

import logging
import subprocess
from typing import Optional

from common.command_utils import log_provision, run_elevated_command
from common.debian.apt_manager import AptManager
from common.system_utils import enable_service, service_status, start_service
from installer.vendor_repository import register_vendor_repository
from provisioner.config_models import AppSettings
from provisioner.exceptions import ServiceStartError, VerificationError

module_logger = logging.getLogger(__name__)


def register_jenkins_repository(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """Add the Jenkins signing key and apt source, then refresh the indexes."""
    logger_to_use = current_logger if current_logger else module_logger
    apt_manager = AptManager(logger=logger_to_use)
    register_vendor_repository(
        app_settings.jenkins, apt_manager, app_settings, logger_to_use
    )


def install_jenkins_package(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    AptManager(logger=logger_to_use).install(
        app_settings.jenkins.package, app_settings
    )


def start_jenkins_service(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Enable Jenkins at boot and start it.

    Raises:
        subprocess.CalledProcessError: If enabling the unit fails.
        ServiceStartError: If the unit does not start.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    service_name = app_settings.jenkins.service_name

    enable_service(service_name, app_settings, current_logger=logger_to_use)
    try:
        start_service(service_name, app_settings, current_logger=logger_to_use)
    except subprocess.CalledProcessError as e:
        message = (
            "Jenkins service failed to start. "
            "Check system logs with 'sudo journalctl -xe'."
        )
        log_provision(
            f"{symbols.get('error', '❌')} {message}",
            "error",
            logger_to_use,
            app_settings,
        )
        raise ServiceStartError(message) from e
    log_provision(
        f"{symbols.get('success', '✅')} Jenkins service started.",
        "success",
        logger_to_use,
        app_settings,
    )


def verify_jenkins_service(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """Print ``systemctl status`` for Jenkins; a non-zero status is fatal."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    service_name = app_settings.jenkins.service_name

    result = service_status(service_name, app_settings, current_logger=logger_to_use)
    if result.returncode != 0:
        message = f"Jenkins service is not running (systemctl status rc {result.returncode})."
        log_provision(
            f"{symbols.get('error', '❌')} {message}",
            "error",
            logger_to_use,
            app_settings,
        )
        raise VerificationError(message)


def show_initial_admin_password(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> str:
    """
    Read and print the administrator password Jenkins generated on first start.

    The file is root-only, so it is read with elevation.

    Returns:
        The password.

    Raises:
        subprocess.CalledProcessError: If the file cannot be read.
        VerificationError: If the file is empty.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    password_path = app_settings.jenkins.initial_admin_password_path

    result = run_elevated_command(
        ["cat", str(password_path)],
        app_settings,
        current_logger=logger_to_use,
    )
    password = (result.stdout or "").strip()
    if not password:
        message = f"Jenkins initial admin password file {password_path} is empty."
        log_provision(
            f"{symbols.get('error', '❌')} {message}",
            "error",
            logger_to_use,
            app_settings,
        )
        raise VerificationError(message)

    log_provision(
        f"{symbols.get('key', '🔑')} Jenkins initial admin password: {password}",
        "info",
        logger_to_use,
        app_settings,
    )
    return password
