# common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions for the provisioner.

This module includes functions for determining the OS codename, driving
systemd units, managing the service account and updating the PATH of the
running process.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional, Union

from common.command_utils import (
    log_provision,
    run_command,
    run_elevated_command,
)
from provisioner.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def get_debian_codename(
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Optional[str]:
    """
    Get the distribution codename (e.g., 'bookworm', 'jammy').

    Returns None when ``lsb_release`` is missing or prints nothing.
    A failing ``lsb_release`` propagates as CalledProcessError.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols if app_settings else {}

    try:
        result: subprocess.CompletedProcess = run_command(
            ["lsb_release", "-cs"],
            app_settings,
            check=True,
            current_logger=logger_to_use,
        )
    except FileNotFoundError:
        log_provision(
            f"{symbols.get('warning', '!')} lsb_release command not found. Cannot determine OS codename.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return None
    stdout_val: Optional[str] = result.stdout
    if stdout_val and stdout_val.strip():
        return stdout_val.strip()
    return None


def enable_service(
    service_name: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Enable a systemd unit at boot."""
    run_elevated_command(
        ["systemctl", "enable", service_name],
        app_settings,
        current_logger=current_logger,
    )


def start_service(
    service_name: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Start a systemd unit. Raises CalledProcessError if it does not start."""
    run_elevated_command(
        ["systemctl", "start", service_name],
        app_settings,
        current_logger=current_logger,
    )


def service_status(
    service_name: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> subprocess.CompletedProcess:
    """
    Query ``systemctl status`` without a pager.

    The result is returned unchecked so callers decide what a non-zero
    status means.
    """
    return run_elevated_command(
        ["systemctl", "status", service_name, "--no-pager"],
        app_settings,
        check=False,
        current_logger=current_logger,
    )


def user_exists(
    username: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """Check the identity database for ``username`` using ``id``."""
    result = run_command(
        ["id", username],
        app_settings,
        check=False,
        current_logger=current_logger,
    )
    return result.returncode == 0


def ensure_system_user(
    username: str,
    home_dir: Union[str, Path],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Create ``username`` with home directory ``home_dir`` unless it exists.

    Returns:
        True if the account was created, False if it already existed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols

    if user_exists(username, app_settings, current_logger=logger_to_use):
        log_provision(
            f"{symbols.get('info', 'ℹ️')} User '{username}' already exists. Skipping creation.",
            "info",
            logger_to_use,
            app_settings,
        )
        return False

    log_provision(
        f"{symbols.get('gear', '⚙️')} Creating user '{username}' with home {home_dir}...",
        "info",
        logger_to_use,
        app_settings,
    )
    run_elevated_command(
        ["useradd", "-m", "-d", str(home_dir), username],
        app_settings,
        current_logger=logger_to_use,
    )
    log_provision(
        f"{symbols.get('success', '✅')} Created user '{username}'.",
        "success",
        logger_to_use,
        app_settings,
    )
    return True


def extend_process_path(directory: Union[str, Path]) -> str:
    """
    Append ``directory`` to PATH of the running process if missing.

    This is the in-process counterpart of sourcing a profile fragment, so
    commands started later by this process resolve the new executables.

    Returns:
        The resulting PATH.
    """
    directory_str = str(directory)
    current = os.environ.get("PATH", "")
    entries = current.split(os.pathsep) if current else []
    if directory_str not in entries:
        entries.append(directory_str)
        os.environ["PATH"] = os.pathsep.join(entries)
    return os.environ["PATH"]
