# provisioner/main_installer.py
# -*- coding: utf-8 -*-
"""
Main entry point and orchestrator for the CI host provisioner.

Handles argument parsing, configuration loading and logging setup, then runs
the provisioning steps in order and stops at the first failure.
"""

import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import List, Optional

from common.command_utils import log_provision
from common.core_utils import setup_logging
from provisioner import config
from provisioner.cli_handler import list_steps, view_configuration
from provisioner.config_loader import load_app_settings
from provisioner.config_models import (
    LOG_FILE_DEFAULT,
    LOG_PREFIX_DEFAULT,
    AppSettings,
)
from provisioner.step_executor import StepResult, execute_step
from provisioner.steps import Step, build_steps

logger = logging.getLogger(__name__)


@dataclass
class SequenceResult:
    """Outcome of a provisioning run."""

    completed: List[str] = field(default_factory=list)
    failed: Optional[StepResult] = None

    @property
    def success(self) -> bool:
        return self.failed is None

    @property
    def exit_code(self) -> int:
        return 0 if self.failed is None else self.failed.exit_code


def run_sequence(
    steps: List[Step],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> SequenceResult:
    """
    Run ``steps`` in order. Nothing runs after the first failed step.
    """
    logger_to_use = current_logger if current_logger else logger
    result = SequenceResult()
    for step in steps:
        step_result = execute_step(step, app_settings, logger_to_use)
        if not step_result.success:
            result.failed = step_result
            break
        result.completed.append(step.tag)
    return result


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CI Host Provisioner. Installs Java, Jenkins, Terraform, Ansible, "
        "Git, Maven and SonarQube on a Debian/Ubuntu host.",
        epilog="Example: provision-ci-host --maven-version 3.9.9 --log-file /var/log/ci-setup.log",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--view-config",
        action="store_true",
        help="View the effective configuration and exit.",
    )
    parser.add_argument(
        "--list-steps",
        action="store_true",
        help="List the provisioning steps in execution order and exit.",
    )
    parser.add_argument(
        "--config",
        dest="config_file",
        default=config.DEFAULT_CONFIG_FILE,
        help="Path to an optional YAML configuration file.",
    )

    config_group = parser.add_argument_group("Configuration Overrides")
    config_group.add_argument(
        "--maven-version", default=None, help="Maven release to install."
    )
    config_group.add_argument(
        "--sonarqube-version", default=None, help="SonarQube release to install."
    )
    config_group.add_argument(
        "--install-root",
        default=None,
        help="Root directory for archive-based installs.",
    )
    config_group.add_argument(
        "--log-file",
        default=None,
        help="Installation transcript. Appended to, never truncated.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Provision the host and return the process exit status.

    0 when every step succeeded, otherwise the exit status of the failed step.
    """
    parser = build_arg_parser()
    parsed_args = parser.parse_args(argv)

    # Configuration problems belong in the transcript too, so it is opened
    # before loading and reopened once the configured path is known.
    setup_logging(
        log_level=logging.INFO,
        log_file=parsed_args.log_file or LOG_FILE_DEFAULT,
        log_to_console=True,
        log_prefix=LOG_PREFIX_DEFAULT,
        symbols=config.SYMBOLS_DEFAULT,
    )
    app_settings = load_app_settings(
        cli_args=parsed_args,
        config_file_path=parsed_args.config_file,
        current_logger=logger,
    )
    setup_logging(
        log_level=logging.INFO,
        log_file=str(app_settings.log_file),
        log_to_console=True,
        log_prefix=app_settings.log_prefix,
        symbols=app_settings.symbols,
    )
    symbols = app_settings.symbols

    if parsed_args.view_config:
        view_configuration(app_settings, current_logger=logger)
        return 0

    steps = build_steps(app_settings)
    if parsed_args.list_steps:
        list_steps(steps, app_settings, current_logger=logger)
        return 0

    log_provision(
        f"{symbols.get('sparkles', '✨')} Starting CI host provisioning (Script Version: {config.SCRIPT_VERSION})...",
        "info",
        logger,
        app_settings,
    )
    log_provision(
        f"Transcript is appended to {app_settings.log_file}",
        "info",
        logger,
        app_settings,
    )

    result = run_sequence(steps, app_settings, logger)
    if not result.success:
        failed = result.failed
        log_provision(
            f"[ERROR] Provisioning aborted at step {failed.tag} ({failed.description}) "
            f"with exit status {failed.exit_code}.",
            "error",
            logger,
            app_settings,
        )
        return result.exit_code

    log_provision(
        f"{symbols.get('rocket', '🚀')} Installation completed successfully! "
        f"{len(result.completed)} steps executed.",
        "banner",
        logger,
        app_settings,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
