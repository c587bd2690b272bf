import json
import logging
import threading
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class TokenStore:
    """Bearer token persisted as a small JSON file; ``path=None`` keeps it in memory only."""

    def __init__(self, path: Optional[str] = None):
        self._path = Path(path) if path else None
        self._lock = threading.Lock()
        self._token: Optional[str] = None
        self._loaded = False

    def get(self) -> Optional[str]:
        with self._lock:
            if not self._loaded:
                self._token = self._read()
                self._loaded = True
            return self._token

    def save(self, token: str) -> None:
        with self._lock:
            self._token = token
            self._loaded = True
            if self._path:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._path.write_text(json.dumps({"token": token}), encoding="utf-8")

    def clear(self) -> None:
        with self._lock:
            self._token = None
            self._loaded = True
            if self._path and self._path.exists():
                self._path.unlink()

    def _read(self) -> Optional[str]:
        if not self._path or not self._path.exists():
            return None
        try:
            return json.loads(self._path.read_text(encoding="utf-8")).get("token")
        except (OSError, ValueError) as e:
            logger.warning(f"[TokenStore] Ignoring unreadable token file {self._path}: {e}")
            return None
