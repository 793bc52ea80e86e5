"""Runtime configuration for pseudofeed.

Values come from, in order of precedence: command-line flags, environment
variables (a ``.env`` file in the working directory is loaded first), and the
defaults below.

* ``PSEUDOFEED_FILE`` – path of the feed document; defaults to a file named
  ``pseudofeed`` in the per-user configuration directory.
* ``PSEUDOFEED_TITLE`` – title written into a newly created feed.
* ``PSEUDOFEED_PORT`` – listen port (or ``host:port``).
* ``PSEUDOFEED_LOG_LEVEL`` – root log level.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from ..errors import FeedConfigError

APPLICATION_NAME = "pseudofeed"
DEFAULT_TITLE = "Pseudofeed Pages"
DEFAULT_PORT = "8081"
DEFAULT_LOG_LEVEL = "INFO"

load_dotenv()


def user_config_dir() -> Path:
    """Return the per-user configuration directory for this platform."""
    if sys.platform == "win32":
        appdata = os.getenv("APPDATA")
        if not appdata:
            raise FeedConfigError("%APPDATA% is not defined")
        return Path(appdata)

    home = os.getenv("HOME")
    if sys.platform == "darwin":
        if not home:
            raise FeedConfigError("$HOME is not defined")
        return Path(home) / "Library" / "Application Support"

    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        if not os.path.isabs(xdg):
            raise FeedConfigError("path in $XDG_CONFIG_HOME is relative")
        return Path(xdg)
    if not home:
        raise FeedConfigError("neither $XDG_CONFIG_HOME nor $HOME are defined")
    return Path(home) / ".config"


def default_feed_path() -> Path:
    override = os.getenv("PSEUDOFEED_FILE")
    if override:
        return Path(override).expanduser()
    return user_config_dir() / APPLICATION_NAME


def normalize_address(port: Optional[str]) -> str:
    """Return a listen address that always carries a colon.

    ``"8081"`` becomes ``":8081"``; ``":8081"`` and ``"127.0.0.1:8081"`` are
    returned unchanged.
    """
    port = (port or "").strip()
    if not port:
        raise FeedConfigError("Port is required")
    if ":" not in port:
        port = ":" + port
    return port


def split_address(address: str) -> Tuple[str, int]:
    """Split a normalized address into ``(host, port)`` for uvicorn.

    An empty host binds every interface.
    """
    host, _, port = address.rpartition(":")
    try:
        number = int(port)
    except ValueError as exc:
        raise FeedConfigError(f"Invalid port: {port!r}") from exc
    if not 0 < number < 65536:
        raise FeedConfigError(f"Port out of range: {number}")
    return host.strip("[]") or "0.0.0.0", number


@dataclass
class Settings:
    feed_path: Path
    feed_title: str = DEFAULT_TITLE
    address: str = ":" + DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, port: Optional[str] = None, log_level: Optional[str] = None) -> "Settings":
        """Build settings from the environment, letting explicit arguments win."""
        return cls(
            feed_path=default_feed_path(),
            feed_title=os.getenv("PSEUDOFEED_TITLE", DEFAULT_TITLE),
            address=normalize_address(port or os.getenv("PSEUDOFEED_PORT", DEFAULT_PORT)),
            log_level=(log_level or os.getenv("PSEUDOFEED_LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper(),
        )
