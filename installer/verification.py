# installer/verification.py
# -*- coding: utf-8 -*-
"""
Post-install checks shared by the installers.

A tool counts as installed only if its version or status command exits 0,
whatever the install step itself reported.
"""

import logging
import shlex
from typing import List, Optional

from common.command_utils import log_provision, run_as_user, run_command
from provisioner.config_models import AppSettings
from provisioner.exceptions import VerificationError

module_logger = logging.getLogger(__name__)


def verify_command(
    command: List[str],
    failure_message: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    run_as: Optional[str] = None,
) -> str:
    """
    Run a version/status command and raise VerificationError unless it exits 0.

    Args:
        command: The check to run, e.g. ``["java", "-version"]``.
        failure_message: Message of the raised VerificationError.
        app_settings: The application settings.
        current_logger: Optional logger instance.
        run_as: Run the check in a login shell of this account instead of
            the invoking user.

    Returns:
        The combined output of the check, stripped.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols

    try:
        if run_as:
            result = run_as_user(
                run_as,
                shlex.join(command),
                app_settings,
                check=False,
                current_logger=logger_to_use,
            )
        else:
            result = run_command(
                command,
                app_settings,
                check=False,
                current_logger=logger_to_use,
            )
    except FileNotFoundError as e:
        log_provision(
            f"{symbols.get('error', '❌')} {failure_message}",
            "error",
            logger_to_use,
            app_settings,
        )
        raise VerificationError(failure_message) from e

    if result.returncode != 0:
        log_provision(
            f"{symbols.get('error', '❌')} {failure_message} (rc {result.returncode})",
            "error",
            logger_to_use,
            app_settings,
        )
        raise VerificationError(failure_message)

    # Some tools (java -version) print their version on stderr.
    output = "\n".join(
        part.strip() for part in (result.stdout, result.stderr) if part and part.strip()
    )
    log_provision(
        f"{symbols.get('success', '✅')} Verified: {' '.join(command)}",
        "success",
        logger_to_use,
        app_settings,
    )
    return output
