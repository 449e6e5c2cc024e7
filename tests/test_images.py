import asyncio

from poclidex.services import images
from poclidex.services.images import (
    COLOR_MODES, HINT_FAILED, HINT_NOT_INSTALLED, PLACEHOLDER_TEXT, ImageService, placeholder,
)

URL = "https://img.example/sprites/25.png"

def test_placeholder_dimensions_and_text():
    out = placeholder(30, 6, HINT_NOT_INSTALLED).split("\n")
    assert len(out) == 6
    assert all(len(line) == 30 for line in out)
    assert out[3].strip() == PLACEHOLDER_TEXT
    assert out[4].strip() == HINT_NOT_INSTALLED

def test_chafa_missing_gives_install_hint(api, tmp_path, monkeypatch):
    api.images[URL] = b"\x89PNG"
    monkeypatch.setattr(images.shutil, "which", lambda name: None)
    svc = ImageService(api, color_mode="256", temp_dir=tmp_path)
    out = asyncio.run(svc.url_to_ascii(URL, 24, 4))
    assert HINT_NOT_INSTALLED in out
    assert svc.cache.size == 0
    assert list(tmp_path.iterdir()) == []

def test_download_failure_gives_failed_hint(api, tmp_path):
    svc = ImageService(api, color_mode="256", temp_dir=tmp_path)
    out = asyncio.run(svc.url_to_ascii(URL, 24, 4))
    assert HINT_FAILED in out

def test_successful_render_is_cached(api, tmp_path, monkeypatch):
    api.images[URL] = b"\x89PNG"
    svc = ImageService(api, color_mode="full", temp_dir=tmp_path)
    calls = []

    async def fake_chafa(path, width, height):
        calls.append(svc.chafa_args(path, width, height))
        return "ART"

    monkeypatch.setattr(svc, "_chafa", fake_chafa)

    async def go():
        return await svc.url_to_ascii(URL, 10, 5), await svc.url_to_ascii(URL, 10, 5)

    assert asyncio.run(go()) == ("ART", "ART")
    assert len(calls) == 1
    assert "--colors=full" in calls[0] and "--size=10x5" in calls[0] and "--polite=on" in calls[0]

def test_cycling_render_options():
    svc = ImageService(api=None, color_mode="8")
    assert svc.cycle_color_mode() == COLOR_MODES[0]
    assert svc.cycle_color_space() == "din99d"
    assert svc.cycle_dither_mode() == "diffusion"
    assert svc.cycle_symbol_set() == "half"
    assert svc.describe_mode() == "colors=full space=din99d dither=diffusion symbols=half"
