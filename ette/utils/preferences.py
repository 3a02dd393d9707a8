# preferences.py
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional, Union

from ..core.format_config import ALGORITHM_NAMES, CryptoAlgorithm

logger = logging.getLogger(__name__)

PREFERENCES_ENV = "ETTE_PREFERENCES"
PREFERENCES_FILE = "preferences.json"


def default_preferences_path() -> Path:
    override = os.getenv(PREFERENCES_ENV)
    if override:
        return Path(override)
    if os.name == "nt":
        base = os.getenv("APPDATA") or str(Path.home())
        return Path(base) / "ette" / PREFERENCES_FILE
    base = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "ette" / PREFERENCES_FILE


@dataclass
class Preferences:
    status_message_seconds: int = 5
    syntax_highlighting: bool = True
    default_algorithm: str = "aes256cbc"  # or "aes256cbc-argon2"
    debug_logging: bool = False

    def normalize(self) -> None:
        defaults = Preferences()
        value = self.status_message_seconds
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            self.status_message_seconds = defaults.status_message_seconds
        for name in ("syntax_highlighting", "debug_logging"):
            if not isinstance(getattr(self, name), bool):
                setattr(self, name, getattr(defaults, name))
        if not isinstance(self.default_algorithm, str):
            self.default_algorithm = defaults.default_algorithm
        self.default_algorithm = self.default_algorithm.strip().lower()
        if self.default_algorithm not in ALGORITHM_NAMES:
            self.default_algorithm = defaults.default_algorithm

    @property
    def crypto_algorithm(self) -> CryptoAlgorithm:
        return ALGORITHM_NAMES.get(self.default_algorithm, CryptoAlgorithm.AES256_CBC)

    def load_preferences(self, path: Optional[Union[str, Path]] = None) -> None:
        target = Path(path) if path else default_preferences_path()
        try:
            with open(target, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return
        except (OSError, ValueError) as e:
            logger.warning("Could not load preferences from %s: %s", target, e)
            return

        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s: expected a JSON object", target)
            return
        known = {f.name for f in fields(self)}
        for key, value in data.items():
            if key in known:
                setattr(self, key, value)
        self.normalize()

    def save_preferences(self, path: Optional[Union[str, Path]] = None) -> None:
        target = Path(path) if path else default_preferences_path()
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=4)


EttePreferences = Preferences()
