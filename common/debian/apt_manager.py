# common/debian/apt_manager.py
# -*- coding: utf-8 -*-
import logging
import os
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from common.command_utils import (
    command_exists,
    run_command,
    run_elevated_command,
)
from common.file_utils import (
    cleanup_temp_file,
    download_file,
    write_file_elevated,
)
from provisioner.config_models import AppSettings

# sudo resets the environment, so the variables travel on the command line.
APT_ENV_PREFIX = ["env", "DEBIAN_FRONTEND=noninteractive", "NEEDRESTART_MODE=a"]
# Keep locally modified configuration files without asking.
DPKG_CONFFILE_OPTIONS = [
    "-o",
    "Dpkg::Options::=--force-confdef",
    "-o",
    "Dpkg::Options::=--force-confold",
]


class AptManager:
    """
    A centralized manager for Debian apt packages and vendor repositories
    using command-line tools.

    Every failure propagates as an exception: a provisioning run never
    continues past a broken package operation.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initializes the AptManager.
        Args:
            logger: An optional logging object.
        """
        self.logger = logger or logging.getLogger(__name__)
        if not command_exists("apt-get"):
            self.logger.critical(
                "'apt-get' command not found. This manager cannot function."
            )
            raise FileNotFoundError(
                "'apt-get' not found. Is this a Debian-based system?"
            )

    def update(self, app_settings: AppSettings) -> None:
        """
        Refreshes the package indexes using 'apt-get update'.
        """
        self.logger.info("Updating apt package lists via 'apt-get update'...")
        run_elevated_command(
            ["apt-get", "update", "-yq"],
            app_settings,
            current_logger=self.logger,
        )
        self.logger.info("Apt package lists updated successfully.")

    def upgrade(self, app_settings: AppSettings) -> None:
        """
        Upgrades all installed packages using 'apt-get upgrade'.

        Runs without debconf or conffile prompts: the output is captured, so
        a prompt would never be seen.
        """
        self.logger.info("Upgrading installed packages via 'apt-get upgrade'...")
        run_elevated_command(
            APT_ENV_PREFIX + ["apt-get", "upgrade", "-yq"] + DPKG_CONFFILE_OPTIONS,
            app_settings,
            current_logger=self.logger,
        )
        self.logger.info("Installed packages upgraded successfully.")

    def is_installed(self, pkg_name: str, app_settings: AppSettings) -> bool:
        """
        Returns True if dpkg reports ``pkg_name`` as installed.
        """
        try:
            result = run_command(
                ["dpkg-query", "-W", "-f=${db:Status-Status}", pkg_name],
                app_settings,
                check=True,
                current_logger=self.logger,
            )
        except subprocess.CalledProcessError:
            return False
        return result.stdout.strip() == "installed"

    def install(
        self,
        packages: Union[List[str], str],
        app_settings: AppSettings,
    ) -> None:
        """
        Installs one or more packages using 'apt-get install'.

        Packages dpkg already reports as installed are skipped.

        Args:
            packages: A single package name or a list of package names.
            app_settings: The application settings.

        Raises:
            subprocess.CalledProcessError: If apt-get fails.
        """
        if not isinstance(packages, list):
            packages = [packages]

        packages_to_install = []
        for pkg_name in packages:
            if self.is_installed(pkg_name, app_settings):
                self.logger.info(
                    f"Package '{pkg_name}' is already installed. Skipping."
                )
            else:
                self.logger.info(
                    f"Marking package for installation: {pkg_name}"
                )
                packages_to_install.append(pkg_name)

        if not packages_to_install:
            self.logger.info("All requested packages are already installed.")
            return

        self.logger.info(
            f"Committing installation for: {', '.join(packages_to_install)}"
        )
        run_elevated_command(
            APT_ENV_PREFIX
            + ["apt-get", "install", "-yq"]
            + DPKG_CONFFILE_OPTIONS
            + packages_to_install,
            app_settings,
            current_logger=self.logger,
        )
        self.logger.info("Packages installed successfully.")

    def add_gpg_key_from_url(
        self,
        key_url: str,
        keyring_path: Union[str, Path],
        app_settings: AppSettings,
        dearmor: bool = False,
    ) -> None:
        """
        Downloads a signing key and stores it at ``keyring_path``.

        Args:
            key_url: The URL of the key.
            keyring_path: Where apt expects the keyring (referenced by signed-by).
            app_settings: The application settings.
            dearmor: Convert an ASCII-armored key into a binary keyring.

        Raises:
            CommandFailedError: If the download fails.
            subprocess.CalledProcessError: If storing the key fails.
        """
        keyring_path = str(keyring_path)
        self.logger.info(f"Adding signing key from {key_url} to {keyring_path}")

        fd, temp_key_path = tempfile.mkstemp(
            prefix="ci_host_key_", suffix=os.path.splitext(keyring_path)[1]
        )
        os.close(fd)
        try:
            download_file(
                key_url, temp_key_path, app_settings, current_logger=self.logger
            )
            if dearmor:
                run_elevated_command(
                    ["install", "-m", "0755", "-d", os.path.dirname(keyring_path)],
                    app_settings,
                    current_logger=self.logger,
                )
                run_elevated_command(
                    ["gpg", "--batch", "--yes", "--dearmor", "-o", keyring_path, temp_key_path],
                    app_settings,
                    current_logger=self.logger,
                )
                run_elevated_command(
                    ["chmod", "a+r", keyring_path],
                    app_settings,
                    current_logger=self.logger,
                )
            else:
                run_elevated_command(
                    ["install", "-D", "-m", "644", temp_key_path, keyring_path],
                    app_settings,
                    current_logger=self.logger,
                )
        finally:
            cleanup_temp_file(temp_key_path, app_settings, self.logger)
        self.logger.info("Signing key added and permissions set.")

    @staticmethod
    def build_source_line(
        keyring_path: Union[str, Path],
        repo_uri: str,
        suite: str,
        components: str = "",
    ) -> str:
        """
        Builds a one-line ``deb`` entry bound to its signing key.

        >>> AptManager.build_source_line("/k.gpg", "https://r.example", "jammy", "main")
        'deb [signed-by=/k.gpg] https://r.example jammy main'
        """
        parts = [f"deb [signed-by={keyring_path}]", repo_uri, suite]
        if components.strip():
            parts.append(components.strip())
        return " ".join(parts)

    def add_repository(
        self,
        source_line: str,
        sources_list_path: Union[str, Path],
        app_settings: AppSettings,
        update_after: bool = True,
    ) -> None:
        """
        Writes ``source_line`` as the sole content of ``sources_list_path``.

        Args:
            source_line: A one-line ``deb`` entry.
            sources_list_path: The ``.list`` file under sources.list.d.
            app_settings: The application settings.
            update_after: Whether to refresh the package indexes afterwards.
        """
        self.logger.info(f"Adding repository: {source_line}")
        write_file_elevated(
            source_line + "\n",
            sources_list_path,
            app_settings,
            mode="644",
            current_logger=self.logger,
        )
        self.logger.info(
            f"Successfully created repository file: {sources_list_path}"
        )
        if update_after:
            self.update(app_settings)
