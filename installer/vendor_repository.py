# installer/vendor_repository.py
# -*- coding: utf-8 -*-
"""
Registers a vendor apt repository signed by its own key.
"""

import logging
from typing import Optional

from common.command_utils import log_provision
from common.debian.apt_manager import AptManager
from common.system_utils import get_debian_codename
from provisioner.config_models import AppSettings, AptRepositorySettings

module_logger = logging.getLogger(__name__)


def register_vendor_repository(
    repo_settings: AptRepositorySettings,
    apt_manager: AptManager,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Fetch the signing key, write the sources list and refresh the indexes.

    The steps run in that order and any failure aborts the rest. A
    repository without an explicit suite is bound to the host's OS codename.

    Returns:
        The source line that was written.

    Raises:
        EnvironmentError: If the suite is taken from the OS codename and the
            codename cannot be determined.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols

    apt_manager.add_gpg_key_from_url(
        repo_settings.key_url,
        repo_settings.keyring_path,
        app_settings,
        dearmor=repo_settings.dearmor_key,
    )
    log_provision(
        f"{symbols.get('key', '🔑')} Signing key stored at {repo_settings.keyring_path}.",
        "success",
        logger_to_use,
        app_settings,
    )

    suite = repo_settings.suite
    if not suite:
        suite = get_debian_codename(app_settings, current_logger=logger_to_use)
        if not suite:
            raise EnvironmentError(
                f"Could not determine OS codename for repository {repo_settings.repo_uri}."
            )

    source_line = AptManager.build_source_line(
        repo_settings.keyring_path,
        repo_settings.repo_uri,
        suite,
        repo_settings.components,
    )
    apt_manager.add_repository(
        source_line,
        repo_settings.sources_list_path,
        app_settings,
        update_after=True,
    )
    log_provision(
        f"{symbols.get('success', '✅')} Repository {repo_settings.repo_uri} registered.",
        "success",
        logger_to_use,
        app_settings,
    )
    return source_line
