"""Sprite to terminal art via the external `chafa` binary.

Downloads go to a temp file, chafa renders it, output is cached per URL, size
and render options. Any failure yields a placeholder block of the requested
size instead of raising.
"""
from __future__ import annotations
import asyncio
import itertools
import shutil
from pathlib import Path
from typing import Optional, Sequence, Tuple

from poclidex.core.errors import UpstreamFailure
from poclidex.core.logging import logger
from poclidex.core.paths import sprite_dir
from poclidex.utils.cache import MISS, LRUCache
from poclidex.utils.terminal import chafa_color_mode

CHAFA = "chafa"
COLOR_MODES: Tuple[str, ...] = ("full", "256", "16", "8")
COLOR_SPACES: Tuple[str, ...] = ("rgb", "din99d")
DITHER_MODES: Tuple[str, ...] = ("bayer", "diffusion", "ordered", "none")
SYMBOL_SETS: Tuple[str, ...] = ("block", "half", "ascii", "all")

PLACEHOLDER_TEXT = "Sprite unavailable"
HINT_NOT_INSTALLED = "(chafa not installed)"
HINT_FAILED = "(failed to load)"

class ChafaNotFound(UpstreamFailure):
    def __init__(self, detail: str = "chafa not found on PATH"):
        super().__init__(CHAFA, detail)

def _next(options: Sequence[str], current: str) -> str:
    i = options.index(current) if current in options else -1
    return options[(i + 1) % len(options)]

def _centered(text: str, width: int) -> str:
    return (" " * max(0, (width - len(text)) // 2) + text).ljust(width)

def placeholder(width: int, height: int, hint: str = HINT_FAILED) -> str:
    mid = height // 2
    lines = []
    for i in range(height):
        if i == mid:
            lines.append(_centered(PLACEHOLDER_TEXT, width))
        elif i == mid + 1:
            lines.append(_centered(hint, width))
        else:
            lines.append(" " * width)
    return "\n".join(lines)

class ImageService:
    def __init__(self, api, settings=None, color_mode: Optional[str] = None, temp_dir: Optional[Path] = None):
        self.api = api
        self.settings = settings
        self.cache: LRUCache[tuple, str] = LRUCache(50)
        self.color_mode = color_mode or chafa_color_mode()
        self.color_space = COLOR_SPACES[0]
        self.dither = DITHER_MODES[0]
        self.symbols = SYMBOL_SETS[0]
        self._temp_dir = temp_dir
        self._counter = itertools.count()

    @property
    def temp_dir(self) -> Path:
        if self._temp_dir is None:
            self._temp_dir = sprite_dir()
        else:
            self._temp_dir.mkdir(parents=True, exist_ok=True)
        return self._temp_dir

    def _default_size(self) -> Tuple[int, int]:
        if self.settings is not None:
            return self.settings.data.sprite_width, self.settings.data.sprite_height
        return 40, 20

    def chafa_args(self, path: Path, width: int, height: int) -> list:
        return [
            "--format=symbols",
            f"--colors={self.color_mode}",
            f"--color-space={self.color_space}",
            f"--dither={self.dither}",
            f"--symbols={self.symbols}",
            "--polite=on",
            f"--size={width}x{height}",
            str(path),
        ]

    async def url_to_ascii(self, url: str, width: Optional[int] = None, height: Optional[int] = None) -> str:
        dw, dh = self._default_size()
        width, height = width or dw, height or dh
        key = (url, width, height, self.color_mode, self.color_space, self.dither, self.symbols)
        cached = self.cache.get(key)
        if cached is not MISS:
            return cached
        try:
            path = await self._download(url)
            try:
                art = await self._chafa(path, width, height)
            finally:
                path.unlink(missing_ok=True)
        except ChafaNotFound as e:
            logger.warn("ChafaMissing", error=str(e))
            return placeholder(width, height, HINT_NOT_INSTALLED)
        except (UpstreamFailure, OSError) as e:
            logger.warn("SpriteRenderFailed", url=url, error=str(e))
            return placeholder(width, height, HINT_FAILED)
        self.cache.set(key, art)
        return art

    async def _download(self, url: str) -> Path:
        data = await self.api.download(url)
        path = self.temp_dir / f"sprite-{next(self._counter)}.png"
        path.write_bytes(data)
        return path

    async def _chafa(self, path: Path, width: int, height: int) -> str:
        exe = shutil.which(CHAFA)
        if exe is None:
            raise ChafaNotFound()
        proc = await asyncio.create_subprocess_exec(
            exe, *self.chafa_args(path, width, height),
            stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE,
        )
        out, err = await proc.communicate()
        if proc.returncode != 0:
            raise UpstreamFailure(CHAFA, f"exited with code {proc.returncode}: {err.decode(errors='replace').strip()}")
        return out.decode(errors="replace")

    # ---- render option cycling

    def cycle_color_mode(self) -> str:
        self.color_mode = _next(COLOR_MODES, self.color_mode)
        return self.color_mode

    def cycle_color_space(self) -> str:
        self.color_space = _next(COLOR_SPACES, self.color_space)
        return self.color_space

    def cycle_dither_mode(self) -> str:
        self.dither = _next(DITHER_MODES, self.dither)
        return self.dither

    def cycle_symbol_set(self) -> str:
        self.symbols = _next(SYMBOL_SETS, self.symbols)
        return self.symbols

    def describe_mode(self) -> str:
        return f"colors={self.color_mode} space={self.color_space} dither={self.dither} symbols={self.symbols}"

    def clear_cache(self):
        self.cache.clear()

__all__ = ["ImageService","ChafaNotFound","placeholder","COLOR_MODES","COLOR_SPACES","DITHER_MODES","SYMBOL_SETS"]
