"""
Centralized path helpers.
"""
from __future__ import annotations
import os
import tempfile
from pathlib import Path

# This file lives at poclidex/core/paths.py
ROOT = Path(__file__).resolve().parents[2]
SETTINGS_FILENAME = ".poclidex_settings.json"
SPRITE_TEMP = Path(tempfile.gettempdir()) / "pokedex-sprites"

def settings_path() -> Path:
    home = Path(os.path.expanduser("~"))
    if home.is_dir() and os.access(home, os.W_OK):
        return home / SETTINGS_FILENAME
    return Path.cwd() / SETTINGS_FILENAME

def sprite_dir() -> Path:
    SPRITE_TEMP.mkdir(parents=True, exist_ok=True)
    return SPRITE_TEMP
