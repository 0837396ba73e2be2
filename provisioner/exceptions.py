# provisioner/exceptions.py
# -*- coding: utf-8 -*-
"""
Failure types raised by installers and mapped to exit codes by the step executor.

Failed external commands surface as ``subprocess.CalledProcessError`` and keep
their own return code. Everything else is one of the classes below.
"""

from provisioner.config import EXIT_FAILURE

COMMAND_FAILURE = "command"
VERIFICATION_FAILURE = "verification"


class ProvisioningError(Exception):
    """Base class for failures that abort the provisioning run."""

    kind: str = COMMAND_FAILURE

    def __init__(self, message: str, exit_code: int = EXIT_FAILURE):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class CommandFailedError(ProvisioningError):
    """An action that is not a subprocess (e.g. an HTTP download) failed."""


class VerificationError(ProvisioningError):
    """A post-install check reported a broken or missing installation."""

    kind = VERIFICATION_FAILURE


class ServiceStartError(VerificationError):
    """A service could not be started. The message tells where to look."""
