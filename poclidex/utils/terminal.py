"""Terminal colour capability detection for sprite rendering."""
from __future__ import annotations
import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

ColorMode = str  # "full" | "256" | "16" | "8"

COLOR_OVERRIDE_ENV = "POKEDEX_COLORS"
_OVERRIDES = {"full": "full", "truecolor": "full", "256": "256", "16": "16", "8": "8"}

@dataclass(frozen=True)
class TerminalCapabilities:
    truecolor: bool
    colors256: bool
    colors16: bool
    tput_colors: int
    term: str
    colorterm: str
    term_program: str

def _tput_colors() -> int:
    if not shutil.which("tput"):
        return 0
    try:
        out = subprocess.run(["tput", "colors"], capture_output=True, text=True, timeout=2)
    except (OSError, subprocess.SubprocessError):
        return 0
    try:
        return int(out.stdout.strip() or 0)
    except ValueError:
        return 0

def detect_terminal_capabilities(env: Optional[Mapping[str, str]] = None,
                                 tput_colors: Optional[int] = None) -> TerminalCapabilities:
    env = os.environ if env is None else env
    term = env.get("TERM", "")
    colorterm = env.get("COLORTERM", "")
    tput = _tput_colors() if tput_colors is None else tput_colors
    return TerminalCapabilities(
        truecolor=colorterm in ("truecolor", "24bit"),
        colors256="256" in term or tput >= 256,
        colors16="color" in term,
        tput_colors=tput,
        term=term,
        colorterm=colorterm,
        term_program=env.get("TERM_PROGRAM", ""),
    )

def chafa_color_mode(env: Optional[Mapping[str, str]] = None,
                     caps: Optional[TerminalCapabilities] = None) -> ColorMode:
    env = os.environ if env is None else env
    override = _OVERRIDES.get(env.get(COLOR_OVERRIDE_ENV, "").lower())
    if override:
        return override
    caps = caps or detect_terminal_capabilities(env)
    if caps.truecolor:
        return "full"
    if caps.colors256:
        return "256"
    if caps.colors16:
        return "16"
    return "8"

def _yes(flag: bool) -> str:
    return "[green]✓ Yes[/green]" if flag else "[red]✗ No[/red]"

def terminal_report(env: Optional[Mapping[str, str]] = None) -> Group:
    """Rich renderable describing what was detected, for --debug-colors."""
    env = os.environ if env is None else env
    caps = detect_terminal_capabilities(env)
    mode = chafa_color_mode(env, caps)

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="bold")
    table.add_column()
    table.add_row("TERM", caps.term or "(not set)")
    table.add_row("COLORTERM", caps.colorterm or "(not set)")
    table.add_row("TERM_PROGRAM", caps.term_program or "(not set)")
    table.add_row("Truecolor", _yes(caps.truecolor))
    table.add_row("256 colors", _yes(caps.colors256))
    table.add_row("16 colors", _yes(caps.colors16))
    table.add_row("tput colors", str(caps.tput_colors) if caps.tput_colors > 0 else "(unavailable)")
    table.add_row("Chafa mode", f"[bold cyan]{mode}[/bold cyan]")
    if env.get(COLOR_OVERRIDE_ENV):
        table.add_row("Override", f"{env[COLOR_OVERRIDE_ENV]} (via {COLOR_OVERRIDE_ENV})")

    sample = Text.assemble(
        ("Bright Red ", "color(196)"), ("Pure Red ", "#ff0000"), ("Orange ", "#ffa500"), ("Green", "#00ff00"),
    )
    parts = [Panel(table, title="Terminal Color Capability Detection", border_style="bright_white"), sample]
    if not caps.truecolor and caps.term_program == "tmux":
        parts.append(Text('tmux without truecolor: add  set -ga terminal-overrides ",*256col*:Tc"', style="yellow"))
    if mode != "full":
        parts.append(Text(f"Force a mode with: export {COLOR_OVERRIDE_ENV}=full", style="dim"))
    return Group(*parts)

__all__ = [
    "TerminalCapabilities","detect_terminal_capabilities","chafa_color_mode","terminal_report","COLOR_OVERRIDE_ENV",
]
