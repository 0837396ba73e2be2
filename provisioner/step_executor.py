# provisioner/step_executor.py
# -*- coding: utf-8 -*-
"""
Provides functionality to execute individual provisioning steps.

A step runs its action and then its verification. Whatever either raises is
turned into a failed StepResult carrying the exit status the process should
end with.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

from common.command_utils import BANNER_LEVEL, log_provision
from provisioner.config import EXIT_COMMAND_NOT_FOUND, EXIT_FAILURE
from provisioner.config_models import AppSettings
from provisioner.exceptions import COMMAND_FAILURE, ProvisioningError
from provisioner.steps import Step

module_logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    tag: str
    description: str
    success: bool
    exit_code: int = 0
    error_kind: Optional[str] = None
    message: str = ""


def _failure(step: Step, exit_code: int, error_kind: str, message: str) -> StepResult:
    return StepResult(
        tag=step.tag,
        description=step.description,
        success=False,
        exit_code=exit_code,
        error_kind=error_kind,
        message=message,
    )


def execute_step(
    step: Step,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
) -> StepResult:
    """
    Execute a single provisioning step.

    Failures map to exit statuses as follows:

    * ``subprocess.CalledProcessError``: the command's own return code
      (1 if it has none).
    * ``ProvisioningError``: the error's ``exit_code`` and ``kind``.
    * ``FileNotFoundError`` (missing executable): 127.
    * anything else: 1.

    Args:
        step: The step to run.
        app_settings: The application settings object.
        current_logger_instance: The logger instance to use.

    Returns:
        A StepResult. ``success`` is False if the action or the verification
        raised.
    """
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    symbols = app_settings.symbols

    log_provision(
        f"--- {symbols.get('step', '➡️')} Executing: {step.description} ({step.tag}) ---",
        BANNER_LEVEL,
        logger_to_use,
        app_settings,
    )

    try:
        step.action(app_settings, logger_to_use)
        if step.verification is not None:
            step.verification(app_settings, logger_to_use)
    except subprocess.CalledProcessError as e:
        exit_code = e.returncode if e.returncode and e.returncode > 0 else EXIT_FAILURE
        cmd_str = (
            subprocess.list2cmdline(e.cmd) if isinstance(e.cmd, list) else str(e.cmd)
        )
        result = _failure(
            step,
            exit_code,
            COMMAND_FAILURE,
            f"Command `{cmd_str}` exited with status {e.returncode}.",
        )
    except ProvisioningError as e:
        result = _failure(step, e.exit_code, e.kind, e.message)
    except FileNotFoundError as e:
        result = _failure(
            step,
            EXIT_COMMAND_NOT_FOUND,
            COMMAND_FAILURE,
            f"Command not found: {e.filename or e}",
        )
    except Exception as e:
        log_provision(
            f"   Error details: {str(e)}",
            "error",
            logger_to_use,
            app_settings,
            exc_info=True,
        )
        result = _failure(step, EXIT_FAILURE, COMMAND_FAILURE, str(e))
    else:
        log_provision(
            f"--- {symbols.get('success', '✅')} Successfully completed: {step.description} ({step.tag}) ---",
            BANNER_LEVEL,
            logger_to_use,
            app_settings,
        )
        return StepResult(
            tag=step.tag, description=step.description, success=True
        )

    log_provision(
        f"{symbols.get('error', '❌')} FAILED: {step.description} ({step.tag}): {result.message}",
        "error",
        logger_to_use,
        app_settings,
    )
    return result
