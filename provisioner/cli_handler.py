# provisioner/cli_handler.py
# -*- coding: utf-8 -*-
"""
Handles the operator-facing views of the command line interface.
"""

import datetime
import logging
from typing import List, Optional

from common.command_utils import log_provision
from provisioner import config as static_config
from provisioner.config_models import AppSettings
from provisioner.steps import Step

module_logger = logging.getLogger(__name__)


def view_configuration(
    app_config: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Displays the effective configuration: versions, paths and download
    URLs after CLI, YAML, environment and model defaults are applied.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_config.symbols

    config_text = f"{symbols.get('info', 'ℹ️')} Current effective configuration values (CLI > YAML > ENV > Defaults):\n\n"
    config_text += f"  Install Root:                  {app_config.install_root}\n"
    config_text += f"  Log File (transcript):         {app_config.log_file}\n"
    config_text += f"  Log Prefix:                    {app_config.log_prefix}\n"
    config_text += f"  Download Timeout (s):          {app_config.download_timeout}\n\n"

    config_text += "  Java (java.*):\n"
    config_text += f"    Package:                     {app_config.java.package}\n\n"

    config_text += "  Jenkins (jenkins.*):\n"
    config_text += f"    Key URL:                     {app_config.jenkins.key_url}\n"
    config_text += f"    Keyring:                     {app_config.jenkins.keyring_path}\n"
    config_text += f"    Repository:                  {app_config.jenkins.repo_uri} {app_config.jenkins.suite}\n"
    config_text += f"    Service:                     {app_config.jenkins.service_name}\n\n"

    config_text += "  Terraform (terraform.*):\n"
    config_text += f"    Key URL:                     {app_config.terraform.key_url}\n"
    config_text += f"    Repository:                  {app_config.terraform.repo_uri} "
    config_text += f"{app_config.terraform.suite or '<OS codename>'} {app_config.terraform.components}\n\n"

    config_text += "  Ansible (ansible.*):\n"
    config_text += f"    Install:                     {app_config.ansible.pip_command} install {app_config.ansible.pip_package}\n\n"

    config_text += "  Maven (maven.*):\n"
    config_text += f"    Version:                     {app_config.maven.version}\n"
    config_text += f"    Download URL:                {app_config.maven.download_url}\n"
    config_text += f"    Profile Script:              {app_config.maven.profile_script}\n\n"

    config_text += "  SonarQube (sonarqube.*):\n"
    config_text += f"    Version:                     {app_config.sonarqube.version}\n"
    config_text += f"    Download URL:                {app_config.sonarqube.download_url}\n"
    config_text += f"    Service Account:             {app_config.sonarqube.system_user}\n"
    config_text += f"    Distribution Dir:            {app_config.sonarqube.distribution_dir}\n\n"

    config_text += (
        f"  Script Version (static):       {static_config.SCRIPT_VERSION}\n"
    )
    config_text += f"  Timestamp (current view):      {datetime.datetime.now().strftime('%Y-%m-%d-%H%M%S')}\n"

    log_provision(
        "Displaying current configuration:", "info", logger_to_use, app_config
    )
    log_provision(f"\n{config_text}", "info", logger_to_use, app_config)


def list_steps(
    steps: List[Step],
    app_config: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Logs the provisioning sequence in execution order."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_config.symbols

    lines = [f"{symbols.get('info', 'ℹ️')} Provisioning steps (in execution order):"]
    for idx, step in enumerate(steps, start=1):
        check = " [verified]" if step.verification else ""
        lines.append(f"  {idx:>2}. {step.tag:<24} {step.description}{check}")
    log_provision("\n".join(lines), "info", logger_to_use, app_config)
