"""
Rich renderables for the detail screen tabs.

Presenters only format; every value they show was resolved by the services
beforehand, so they are safe to call from tests without a terminal.
"""
from __future__ import annotations
from typing import List, Optional, Sequence

from rich.console import Group
from rich.table import Table
from rich.text import Text
from rich.box import ROUNDED, SIMPLE_HEAD

from poclidex.api.records import AbilityDetail, capitalize_name
from poclidex.models.pokemon import DisplayEntity
from poclidex.services.moves import MoveRecord
from poclidex.services.pokemon import EvolutionStage
from poclidex.ui.theme import STYLES, type_badge, type_label

MAX_STAT = 255
BAR_WIDTH = 20

def _heading(text: str) -> Text:
    return Text(text, style=STYLES["name"])

def stat_bar(value: int, width: int = BAR_WIDTH, max_value: int = MAX_STAT) -> str:
    filled = min(width, max(0, (value * width) // max_value))
    return "█" * filled + "░" * (width - filled)

def stat_line(label: str, value: int, ev: int = 0) -> Text:
    line = Text.assemble((f"{label:<10}", "bold"), f" {value:>3} ", (stat_bar(value), STYLES["stats"]))
    if ev > 0:
        line.append(f" +{ev} EV", style=STYLES["ev"])
    return line

def render_stats(entity: DisplayEntity) -> Group:
    lines: List[Text] = [_heading("Base Stats"), Text("")]
    for (label, value), (_, ev) in zip(entity.stats.items(), entity.ev_yield.items()):
        lines.append(stat_line(label, value, ev))
    lines.append(Text(""))
    lines.append(Text.assemble(("Total:", "bold"), f" {entity.stat_total}"))
    return Group(*lines)

def render_abilities(abilities: Sequence[AbilityDetail]) -> Group:
    lines: List[Text] = [_heading("Abilities")]
    for a in abilities:
        line = Text.assemble("• ", (a.display_name, "bold"))
        if a.is_hidden:
            line.append(" (Hidden)", style="cyan")
        lines.append(line)
        text = a.description or a.effect
        if text:
            lines.append(Text("  " + text, style="grey62"))
    return Group(*lines)

def render_info(entity: DisplayEntity) -> Group:
    lines: List[Text] = [
        _heading("Physical"),
        Text(f"Height: {entity.height_text}"),
        Text(f"Weight: {entity.weight_text}"),
        Text(""),
        _heading("Type"),
        Text(" ").join(type_badge(t) for t in entity.types),
        Text(""),
    ]
    if entity.is_legendary or entity.is_mythical:
        lines.append(_heading("Status"))
        if entity.is_legendary:
            lines.append(Text("★ Legendary", style="red"))
        if entity.is_mythical:
            lines.append(Text("✦ Mythical", style="magenta"))
        lines.append(Text(""))
    if entity.genus:
        lines.extend([_heading("Species"), Text(entity.genus), Text("")])
    lines.extend([_heading("Pokedex Entry"), Text(entity.flavor_text)])
    return Group(*lines)

def render_summary(entity: DisplayEntity) -> str:
    types = "/".join(t.upper() for t in entity.types)
    return f"{types} | BST: {entity.stat_total} | {entity.height_text} | {entity.weight_text}"

def format_learn_method(method: str, level: Optional[int]) -> str:
    if method == "level-up":
        return f"Lv.{level}" if level else "Lv.--"
    return {"machine": "TM", "egg": "Egg", "tutor": "Tutor"}.get(method, capitalize_name(method))

def render_moves(moves: Sequence[MoveRecord]) -> Table:
    table = Table(box=SIMPLE_HEAD, expand=True, header_style="bold")
    for col, justify in (("Name", "left"), ("Type", "left"), ("Pwr", "right"),
                         ("Acc", "right"), ("PP", "right"), ("Method", "left")):
        table.add_column(col, justify=justify)  # type: ignore[arg-type]
    for m in moves:
        table.add_row(
            capitalize_name(m.name),
            type_label(m.type),
            "--" if m.power is None else str(m.power),
            "--" if m.accuracy is None else str(m.accuracy),
            str(m.pp),
            format_learn_method(m.learn_method, m.level_learned),
        )
    if not moves:
        table.add_row("[dim]No moves learnable in this generation[/dim]", "", "", "", "", "")
    return table

def evolution_lines(stage: EvolutionStage, current: str, prefix: str = "") -> List[Text]:
    """Tree lines; linear chains use a down arrow, branches use box connectors."""
    name = capitalize_name(stage.species)
    label = Text(f"[{name}]", style=STYLES["name"]) if stage.species == current else Text(name)
    lines = [Text(prefix) + label]
    branches = stage.evolves_to
    for i, branch in enumerate(branches):
        method = f" {branch.method}" if branch.method else ""
        if len(branches) == 1:
            lines.append(Text(f"{prefix}     ↓{method}", style="grey62"))
            lines.extend(evolution_lines(branch, current, prefix))
        else:
            last = i == len(branches) - 1
            lines.append(Text(f"{prefix}{' └─' if last else ' ├─'}{method} →", style="grey62"))
            lines.extend(evolution_lines(branch, current, prefix + ("    " if last else " │  ")))
    return lines

def render_evolution(stage: EvolutionStage, current: str) -> Group:
    lines = evolution_lines(stage, current)
    if not stage.evolves_to:
        lines.append(Text("This Pokemon does not evolve.", style="dim"))
    return Group(*lines)

HELP_SECTIONS = (
    ("GLOBAL", (
        ("?", "Toggle this help panel"),
        ("Ctrl+C", "Quit application"),
        ("F1 - F9", "Set generation (F1=Gen1, F9=Gen9)"),
    )),
    ("HOME SCREEN", (
        ("Type", "Search by name"),
        ("↑ / ↓", "Navigate list"),
        ("Enter", "Open details"),
    )),
    ("DETAIL SCREEN", (
        ("Tab / 1-4", "Switch tab"),
        ("↑ / ↓", "Scroll moves"),
        ("c / p / d / s", "Cycle sprite colors / space / dither / symbols"),
        ("Esc", "Back to search"),
        ("q", "Quit"),
    )),
)

def render_help() -> Table:
    table = Table(title="Keyboard Shortcuts", box=ROUNDED, show_header=False, border_style=STYLES["name"])
    table.add_column(style=STYLES["name"], no_wrap=True)
    table.add_column()
    for title, rows in HELP_SECTIONS:
        table.add_row(f"[bold cyan]{title}[/bold cyan]", "")
        for key, desc in rows:
            table.add_row(f"  {key}", desc)
    return table

__all__ = [
    "render_stats","render_abilities","render_info","render_summary","render_moves","render_evolution",
    "render_help","evolution_lines","stat_bar","stat_line","format_learn_method",
]
