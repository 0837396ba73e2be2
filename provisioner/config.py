# provisioner/config.py
# -*- coding: utf-8 -*-
"""
Static constants for the CI host provisioner.

Mutable runtime configuration (versions, paths, URLs) lives in
'provisioner/config_models.py' and is resolved by 'provisioner/config_loader.py'.
"""

SCRIPT_VERSION: str = "1.0"

DEFAULT_CONFIG_FILE: str = "config.yaml"

# Exit status used for verification failures, service start failures and
# failed downloads. Failed commands propagate their own return code.
EXIT_FAILURE: int = 1
EXIT_COMMAND_NOT_FOUND: int = 127

SYMBOLS_DEFAULT: dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
    "key": "🔑",
}
