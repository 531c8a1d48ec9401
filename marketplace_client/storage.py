"""
Bearer token persistence, the counterpart of the browser's localStorage.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger('marketplace_client')


class MemoryTokenStore:
    """Keeps the token for the lifetime of the process."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore:
    """Keeps the token in a small JSON file so sessions survive restarts."""

    def __init__(self, path=None):
        default_path = os.getenv('RESOURCE_SHARING_TOKEN_FILE', '~/.resource_sharing/token.json')
        self.path = Path(path or default_path).expanduser()

    def get(self) -> Optional[str]:
        try:
            with self.path.open('r', encoding='utf-8') as fh:
                return json.load(fh).get('token')
        except FileNotFoundError:
            return None
        except (ValueError, AttributeError):
            logger.warning(f"Ignoring unreadable token file {self.path}")
            return None

    def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Owner-only from creation; an existing file is tightened before it is rewritten.
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        os.fchmod(fd, 0o600)
        with os.fdopen(fd, 'w', encoding='utf-8') as fh:
            json.dump({'token': token}, fh)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
