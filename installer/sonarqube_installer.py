# installer/sonarqube_installer.py
# -*- coding: utf-8 -*-
"""
Installs the SonarQube analysis server from the release zip and starts it
under its own service account.
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Optional

from common.command_utils import (
    log_provision,
    run_as_user,
    run_elevated_command,
)
from common.debian.apt_manager import AptManager
from common.file_utils import cleanup_temp_file, download_file
from common.system_utils import ensure_system_user
from installer.verification import verify_command
from provisioner.config_models import AppSettings
from provisioner.exceptions import ServiceStartError

module_logger = logging.getLogger(__name__)


def _control_command(app_settings: AppSettings, action: str) -> str:
    return f"{shlex.quote(str(app_settings.sonarqube.control_script))} {action}"


def _stop_previous_instance(
    app_settings: AppSettings, logger_to_use: logging.Logger
) -> None:
    """Stop a SonarQube of the same version left running by an earlier run."""
    control_script = app_settings.sonarqube.control_script
    if not control_script.exists():
        return
    log_provision(
        f"{app_settings.symbols.get('info', 'ℹ️')} Stopping running SonarQube before replacing {app_settings.sonarqube.distribution_dir}...",
        "info",
        logger_to_use,
        app_settings,
    )
    # Not running is fine; the copy is replaced either way.
    run_as_user(
        app_settings.sonarqube.system_user,
        _control_command(app_settings, "stop"),
        app_settings,
        check=False,
        current_logger=logger_to_use,
    )


def install_sonarqube(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Install and start SonarQube.

    The distribution is unpacked under the installation root, then moved
    into the service account's home, replacing any previous copy of the
    same version. A copy left running by an earlier run is stopped
    first. Ownership is handed to the service account, which is
    the only account SonarQube is ever started as.

    Raises:
        CommandFailedError: If the zip cannot be downloaded.
        subprocess.CalledProcessError: If a filesystem or account command fails.
        ServiceStartError: If SonarQube does not start.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    sonar_cfg = app_settings.sonarqube
    install_root = app_settings.install_root
    system_user = sonar_cfg.system_user

    AptManager(logger=logger_to_use).install(
        list(sonar_cfg.prerequisite_packages), app_settings
    )
    ensure_system_user(
        system_user, sonar_cfg.home_dir, app_settings, current_logger=logger_to_use
    )

    log_provision(
        f"{symbols.get('package', '📦')} Installing SonarQube {sonar_cfg.version}...",
        "info",
        logger_to_use,
        app_settings,
    )
    archive_path = Path.cwd() / sonar_cfg.archive_name
    download_file(
        sonar_cfg.download_url,
        archive_path,
        app_settings,
        current_logger=logger_to_use,
    )

    _stop_previous_instance(app_settings, logger_to_use)
    run_elevated_command(
        ["unzip", "-q", "-o", str(archive_path), "-d", str(install_root)],
        app_settings,
        current_logger=logger_to_use,
    )
    extracted_dir = install_root / sonar_cfg.distribution_name
    distribution_dir = sonar_cfg.distribution_dir
    if extracted_dir != distribution_dir:
        run_elevated_command(
            ["rm", "-rf", str(distribution_dir)],
            app_settings,
            current_logger=logger_to_use,
        )
        run_elevated_command(
            ["install", "-d", str(sonar_cfg.home_dir)],
            app_settings,
            current_logger=logger_to_use,
        )
        run_elevated_command(
            ["mv", str(extracted_dir), str(distribution_dir)],
            app_settings,
            current_logger=logger_to_use,
        )
    run_elevated_command(
        ["chown", "-R", f"{system_user}:{system_user}", str(sonar_cfg.home_dir)],
        app_settings,
        current_logger=logger_to_use,
    )
    cleanup_temp_file(archive_path, app_settings, logger_to_use)

    log_provision(
        f"{symbols.get('rocket', '🚀')} Starting SonarQube as '{system_user}'...",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        run_as_user(
            system_user,
            _control_command(app_settings, "start"),
            app_settings,
            current_logger=logger_to_use,
        )
    except subprocess.CalledProcessError as e:
        message = f"SonarQube failed to start. Check logs in {distribution_dir}/logs."
        log_provision(
            f"{symbols.get('error', '❌')} {message}",
            "error",
            logger_to_use,
            app_settings,
        )
        raise ServiceStartError(message) from e


def verify_sonarqube(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """Query ``sonar.sh status`` as the service account."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols

    verify_command(
        [str(app_settings.sonarqube.control_script), "status"],
        "SonarQube is not running",
        app_settings,
        current_logger=logger_to_use,
        run_as=app_settings.sonarqube.system_user,
    )
    log_provision(
        f"{symbols.get('success', '✅')} SonarQube is now running.",
        "success",
        logger_to_use,
        app_settings,
    )
