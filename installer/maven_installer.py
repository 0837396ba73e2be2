# installer/maven_installer.py
# -*- coding: utf-8 -*-
"""
Installs Apache Maven from the release tarball.

The tarball is extracted under the installation root, a version-agnostic
link points at the extracted directory and a login profile fragment puts
the link's bin directory on PATH.
"""

import logging
from pathlib import Path
from typing import Optional

from common.command_utils import log_provision, run_elevated_command
from common.file_utils import (
    cleanup_temp_file,
    download_file,
    write_file_elevated,
)
from common.system_utils import extend_process_path
from installer.verification import verify_command
from provisioner.config_models import AppSettings

module_logger = logging.getLogger(__name__)

PROFILE_SCRIPT_MODE = "755"


def maven_install_dir(app_settings: AppSettings) -> Path:
    """Directory the tarball extracts to, e.g. /opt/apache-maven-3.9.9."""
    return app_settings.install_root / app_settings.maven.extracted_dir_name


def maven_link_path(app_settings: AppSettings) -> Path:
    return app_settings.install_root / app_settings.maven.link_name


def maven_bin_dir(app_settings: AppSettings) -> Path:
    return maven_link_path(app_settings) / "bin"


def render_profile_script(app_settings: AppSettings) -> str:
    """
    Content of the login profile fragment.

    >>> from provisioner.config_models import AppSettings
    >>> render_profile_script(AppSettings())
    'export PATH=$PATH:/opt/maven/bin\\n'
    """
    return f"export PATH=$PATH:{maven_bin_dir(app_settings)}\n"


def install_maven(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Download, extract and link the configured Maven release.

    Raises:
        CommandFailedError: If the tarball cannot be downloaded, e.g. for a
            version that does not exist.
        subprocess.CalledProcessError: If extraction, linking or writing the
            profile fragment fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    maven_cfg = app_settings.maven
    install_root = app_settings.install_root

    log_provision(
        f"{symbols.get('package', '📦')} Installing Maven {maven_cfg.version}...",
        "info",
        logger_to_use,
        app_settings,
    )
    archive_path = Path.cwd() / maven_cfg.archive_name
    download_file(
        maven_cfg.download_url,
        archive_path,
        app_settings,
        current_logger=logger_to_use,
    )

    run_elevated_command(
        ["tar", "-xzf", str(archive_path), "-C", str(install_root)],
        app_settings,
        current_logger=logger_to_use,
    )
    # -n replaces an existing link instead of creating one inside its target.
    run_elevated_command(
        [
            "ln",
            "-sfn",
            str(maven_install_dir(app_settings)),
            str(maven_link_path(app_settings)),
        ],
        app_settings,
        current_logger=logger_to_use,
    )

    write_file_elevated(
        render_profile_script(app_settings),
        maven_cfg.profile_script,
        app_settings,
        mode=PROFILE_SCRIPT_MODE,
        current_logger=logger_to_use,
    )
    extend_process_path(maven_bin_dir(app_settings))
    log_provision(
        f"{symbols.get('success', '✅')} Maven linked at {maven_link_path(app_settings)}; "
        f"PATH entry written to {maven_cfg.profile_script}.",
        "success",
        logger_to_use,
        app_settings,
    )

    cleanup_temp_file(archive_path, app_settings, logger_to_use)


def verify_maven(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    verify_command(
        ["mvn", "-version"],
        "Maven installation failed",
        app_settings,
        current_logger=current_logger,
    )
