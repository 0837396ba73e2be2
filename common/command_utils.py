# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Command execution for the provisioner.

Every external command goes through run_command so that its command line,
output and failure land in the installation transcript.
"""

import logging
import os
import shutil
import subprocess
from typing import Dict, List, Optional, Union

from provisioner.config import SYMBOLS_DEFAULT
from provisioner.config_models import AppSettings

module_logger = logging.getLogger(__name__)

BANNER_LEVEL = "banner"


def log_provision(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Route a message to ``current_logger`` by level name.

    ``level`` is one of debug, info, success, warning, error, critical or
    banner. Success and banner records are emitted at INFO; banner records
    carry ``banner=True`` so a colored console can highlight step headers.
    ``app_settings`` is accepted for call-site symmetry with the command
    helpers and does not change the output.
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message, exc_info=exc_info)
    elif level == "error":
        effective_logger.error(message, exc_info=exc_info)
    elif level == "critical":
        effective_logger.critical(message, exc_info=exc_info)
    elif level == "debug":
        effective_logger.debug(message, exc_info=exc_info)
    elif level == BANNER_LEVEL:
        effective_logger.info(
            message, exc_info=exc_info, extra={"banner": True}
        )
    else:
        effective_logger.info(message, exc_info=exc_info)


def _get_elevated_command_prefix() -> List[str]:
    """Nothing when running as root, otherwise sudo."""
    return [] if os.geteuid() == 0 else ["sudo"]


def _symbols_for(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    if app_settings and app_settings.symbols:
        return app_settings.symbols
    return SYMBOLS_DEFAULT


def run_command(
    command: Union[List[str], str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    shell: bool = False,
    capture_output: bool = True,
    text: bool = True,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """
    Run ``command`` and copy its command line and output into the log.

    Output is captured by default, so it ends up in the transcript between
    the step banners. A string command without ``shell`` is split on
    whitespace; a list with ``shell`` is joined with spaces.

    Returns:
        The CompletedProcess of the command.

    Raises:
        subprocess.CalledProcessError: On a non-zero exit when ``check`` is set.
            The failure and any captured output are logged first.
        FileNotFoundError: If the executable does not exist.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = _symbols_for(app_settings)

    if shell:
        command_to_run = " ".join(command) if isinstance(command, list) else command
        display = command_to_run
    elif isinstance(command, str):
        log_provision(
            f"{symbols.get('warning', '!')} Splitting string command '{command}' on whitespace; pass a list instead.",
            "warning",
            effective_logger,
            app_settings,
        )
        command_to_run = command.split()
        display = command
    else:
        command_to_run = command
        display = subprocess.list2cmdline(command)

    where = f" (in {cwd})" if cwd else ""
    log_provision(
        f"{symbols.get('gear', '⚙️')} Executing: {display}{where}",
        "info",
        effective_logger,
        app_settings,
    )
    try:
        result = subprocess.run(
            command_to_run,
            check=check,
            shell=shell,
            capture_output=capture_output,
            text=text,
            input=cmd_input,
            cwd=cwd,
            env=env,
        )
    except subprocess.CalledProcessError as e:
        log_provision(
            f"{symbols.get('error', '❌')} Command `{display}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        _log_streams(e.stdout, e.stderr, "error", effective_logger, app_settings)
        raise
    except FileNotFoundError as e:
        log_provision(
            f"{symbols.get('error', '❌')} Command not found: {e.filename}. Is it installed and on PATH?",
            "error",
            effective_logger,
            app_settings,
        )
        raise

    if capture_output:
        _log_streams(result.stdout, result.stderr, "info", effective_logger, app_settings)
    return result


def _log_streams(
    stdout: Optional[str],
    stderr: Optional[str],
    level: str,
    current_logger: logging.Logger,
    app_settings: Optional[AppSettings],
) -> None:
    for label, stream in (("stdout", stdout), ("stderr", stderr)):
        if isinstance(stream, str) and stream.strip():
            log_provision(
                f"   {label}: {stream.strip()}", level, current_logger, app_settings
            )


def run_elevated_command(
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = True,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """Run ``command`` as root: through sudo, or directly when already root."""
    prefix = _get_elevated_command_prefix()
    elevated_command_list = prefix + list(command)
    return run_command(
        elevated_command_list,
        app_settings,
        check=check,
        shell=False,
        capture_output=capture_output,
        text=True,
        cmd_input=cmd_input,
        current_logger=current_logger,
        cwd=cwd,
        env=env,
    )


def run_as_user(
    username: str,
    shell_command: str,
    app_settings: Optional[AppSettings],
    check: bool = True,
    current_logger: Optional[logging.Logger] = None,
) -> subprocess.CompletedProcess:
    """
    Runs ``shell_command`` in a login shell of ``username``.

    Used for services that must never run under the invoking account.
    """
    return run_elevated_command(
        ["su", "-", username, "-c", shell_command],
        app_settings,
        check=check,
        current_logger=current_logger,
    )


def command_exists(command_name: str) -> bool:
    """True if ``command_name`` resolves on PATH."""
    return shutil.which(command_name) is not None
