from __future__ import annotations
import json
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Callable, List, Optional
from poclidex.core.logging import logger, LEVELS
from poclidex.core.paths import settings_path

DEFAULT_API_BASE_URL = "https://pokeapi.co/api/v2"

@dataclass
class SettingsData:
    log_level: str = "WARN"                    # DEBUG / INFO / WARN / ERROR
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: float = 10.0              # seconds, whole request
    sprite_width: int = 40                     # chafa cells
    sprite_height: int = 20
    show_sprites: bool = True

    def normalize(self):
        if str(self.log_level).upper() not in LEVELS:
            self.log_level = "WARN"
        else:
            self.log_level = str(self.log_level).upper()
        if not isinstance(self.api_base_url, str) or not self.api_base_url.startswith(("http://", "https://")):
            self.api_base_url = DEFAULT_API_BASE_URL
        if isinstance(self.request_timeout, bool) or not isinstance(self.request_timeout, (int, float)) \
                or self.request_timeout <= 0:
            self.request_timeout = 10.0
        if isinstance(self.sprite_width, bool) or not isinstance(self.sprite_width, int) \
                or not 8 <= self.sprite_width <= 200:
            self.sprite_width = 40
        if isinstance(self.sprite_height, bool) or not isinstance(self.sprite_height, int) \
                or not 4 <= self.sprite_height <= 100:
            self.sprite_height = 20
        self.show_sprites = bool(self.show_sprites)

class Settings:
    def __init__(self, data: SettingsData, path: Path):
        self.data = data
        self.path = path
        self._listeners: List[Callable[[SettingsData], None]] = []

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        path = path or settings_path()
        if path.exists():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                if not isinstance(raw, dict):
                    raise ValueError("settings file is not an object")
                # Unknown keys are dropped, missing ones take defaults
                known = {f.name for f in fields(SettingsData)}
                data = SettingsData(**{k: v for k, v in raw.items() if k in known})
                data.normalize()
                logger.debug("SettingsLoaded", path=str(path))
                return cls(data, path)
            except (OSError, ValueError, TypeError) as e:
                logger.warn("SettingsParseFailedUsingDefaults", path=str(path), error=str(e))
        data = SettingsData()
        data.normalize()
        return cls(data, path)

    def save(self):
        try:
            self.path.write_text(json.dumps(asdict(self.data), indent=2), encoding="utf-8")
            logger.debug("SettingsSaved", path=str(self.path))
        except OSError as e:
            logger.error("SettingsSaveFailed", error=str(e))

    def update(self, **changes):
        for key, value in changes.items():
            if not hasattr(self.data, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self.data, key, value)
        self.data.normalize()
        logger.set_level(self.data.log_level)  # type: ignore[arg-type]
        self.save()
        self._notify()

    def on_change(self, fn: Callable[[SettingsData], None]):
        self._listeners.append(fn)

    def _notify(self):
        for fn in self._listeners:
            fn(self.data)
