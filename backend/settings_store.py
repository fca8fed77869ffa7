"""
Speech Settings Store

Small JSON key/value file holding the persisted speech state
(``speechConfig`` and ``speechEnabled``). Every read goes back to disk so
that values written by another process are picked up.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from config import settings
from utils.logger import logger


class SettingsStore:
    """JSON file backed key/value store"""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else settings.speech_settings_path

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except Exception as e:
            logger.warning(f"Failed to load speech settings from {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed speech settings in {self.path}")
            return {}
        return data

    def _save(self, data: Dict[str, Any]) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file, then rename over the target
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, 'w') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
            return True
        except Exception as e:
            logger.error(f"Failed to save speech settings to {self.path}: {e}")
            return False

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> bool:
        data = self._load()
        data[key] = value
        return self._save(data)

    def delete(self, key: str) -> bool:
        data = self._load()
        if key not in data:
            return True
        del data[key]
        return self._save(data)

    def all(self) -> Dict[str, Any]:
        return self._load()
