"""
Installers for the tools of a CI host.

Each module installs one tool and exposes ``verify_*`` checks. All functions
take ``(app_settings, current_logger=None)`` and raise on failure.
"""
