# Copyright (c) 2026 Pyry Haulos
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Idempotent ``.env`` loading.

Environment files are read from two locations, in order:

1. ``$XDG_CONFIG_HOME/bucketbrowser/.env``
2. ``.env`` in the current working directory

``python-dotenv`` never overwrites variables that are already set, so
the process environment wins over both files and the XDG file wins over
the working directory.
"""

import logging
from pathlib import Path

from dotenv import load_dotenv
from platformdirs import user_config_path


logger = logging.getLogger(__name__)

APP_NAME = "bucketbrowser"

_dotenv_loaded = False


def get_dotenv_path() -> Path:
    """Return the ``.env`` path inside the XDG config directory."""
    return user_config_path(APP_NAME) / ".env"


def load_dotenv_once() -> None:
    """Load ``.env`` files unless already loaded in this process."""
    global _dotenv_loaded
    if _dotenv_loaded:
        return

    for path in (get_dotenv_path(), Path.cwd() / ".env"):
        if path.exists():
            load_dotenv(path)
            logger.debug("Loaded .env from %s", path)

    _dotenv_loaded = True


def reset_dotenv_state() -> None:
    """Reset the loaded flag. For testing only."""
    global _dotenv_loaded
    _dotenv_loaded = False
