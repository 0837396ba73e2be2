# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions: HTTP downloads, writing root-owned files and
removing temporary artifacts.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import requests

from provisioner.config import SYMBOLS_DEFAULT
from provisioner.config_models import AppSettings
from provisioner.exceptions import CommandFailedError

from .command_utils import log_provision, run_elevated_command

module_logger = logging.getLogger(__name__)

DOWNLOAD_CHUNK_SIZE = 8192


def download_file(
    url: str,
    download_to_path: Union[str, Path],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
    timeout: Optional[int] = None,
) -> Path:
    """
    Download ``url`` to ``download_to_path`` with a streamed GET.

    Args:
        url: The URL to fetch.
        download_to_path: Destination file. Parent directories are created.
        app_settings: Application settings, used for symbols and the default
            timeout.
        current_logger: Optional logger instance.
        timeout: Request timeout in seconds. Defaults to
            ``app_settings.download_timeout``.

    Returns:
        The path of the downloaded file.

    Raises:
        CommandFailedError: On HTTP errors, connection problems, timeouts or
            I/O errors. A partially written file is removed first.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )
    if timeout is None:
        timeout = app_settings.download_timeout if app_settings else 120
    download_path = Path(download_to_path)

    log_provision(
        f"{symbols.get('package', '📦')} Downloading {url} -> {download_path}",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        download_path.parent.mkdir(parents=True, exist_ok=True)
        response = requests.get(url, stream=True, timeout=timeout)
        response.raise_for_status()
        with open(download_path, "wb") as f:
            for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
    except requests.exceptions.HTTPError as http_err:
        error_message = f"HTTP error downloading {url}: {http_err}"
    except requests.exceptions.ConnectionError as conn_err:
        error_message = f"Connection error downloading {url}: {conn_err}"
    except requests.exceptions.Timeout as timeout_err:
        error_message = f"Timed out downloading {url}: {timeout_err}"
    except requests.exceptions.RequestException as req_err:
        error_message = f"Download of {url} failed: {req_err}"
    except OSError as io_err:
        error_message = f"File I/O error saving {url} to {download_path}: {io_err}"
    else:
        log_provision(
            f"{symbols.get('success', '✅')} Downloaded {download_path.name}.",
            "success",
            logger_to_use,
            app_settings,
        )
        return download_path

    cleanup_temp_file(download_path, app_settings, logger_to_use)
    log_provision(
        f"{symbols.get('error', '❌')} {error_message}",
        "error",
        logger_to_use,
        app_settings,
    )
    raise CommandFailedError(error_message)


def write_file_elevated(
    content: str,
    destination: Union[str, Path],
    app_settings: AppSettings,
    mode: str = "644",
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Write ``content`` to a root-owned ``destination`` with permissions ``mode``.

    The content is written to a temporary file first and then put in place
    with ``install``, replacing any previous file.
    """
    logger_to_use = current_logger if current_logger else module_logger
    temp_file_path = ""
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            delete=False,
            prefix="ci_host_",
            suffix=".tmp",
            encoding="utf-8",
        ) as temp_f:
            temp_f.write(content)
            temp_file_path = temp_f.name
        run_elevated_command(
            ["install", "-D", "-m", mode, temp_file_path, str(destination)],
            app_settings,
            current_logger=logger_to_use,
        )
    finally:
        if temp_file_path and os.path.exists(temp_file_path):
            os.unlink(temp_file_path)


def cleanup_temp_file(
    file_path: Union[str, Path],
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Remove a downloaded or temporary file if it exists.
    """
    logger_to_use = current_logger if current_logger else module_logger
    path_to_remove = Path(file_path)
    if path_to_remove.is_file():
        path_to_remove.unlink()
        log_provision(
            f"Cleaned up file: {path_to_remove}",
            "info",
            logger_to_use,
            app_settings,
        )
    elif path_to_remove.exists():
        log_provision(
            f"Path '{path_to_remove}' exists but is not a file. Not removed.",
            "warning",
            logger_to_use,
            app_settings,
        )
