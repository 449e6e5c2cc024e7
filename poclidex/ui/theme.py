"""Colour definitions for the viewer.

Type colours are hex strings without the leading '#'; helpers return rich
style strings.
"""
from __future__ import annotations
from typing import Dict

from rich.text import Text

TYPE_COLORS: Dict[str, str] = {
    "normal":   "A8A878",
    "fire":     "F08030",
    "water":    "6890F0",
    "electric": "F8D030",
    "grass":    "78C850",
    "ice":      "98D8D8",
    "fighting": "C03028",
    "poison":   "A040A0",
    "ground":   "E0C068",
    "flying":   "A890F0",
    "psychic":  "F85888",
    "bug":      "A8B820",
    "rock":     "B8A038",
    "ghost":    "705898",
    "dragon":   "7038F8",
    "dark":     "705848",
    "steel":    "B8B8D0",
    "fairy":    "EE99AC",
}
DEFAULT_TYPE_COLOR = "FFFFFF"

POKEDEX_RED = "#CC0000"
POKEMON_YELLOW = "#FFCB05"
POKEDEX_BLUE = "#3D7DCA"
SCREEN_BLUE = "#3B4CCA"

STYLES: Dict[str, str] = {
    "header": f"bold {POKEDEX_RED}",
    "name": f"bold {POKEMON_YELLOW}",
    "stats": POKEDEX_BLUE,
    "label": f"bold {SCREEN_BLUE}",
    "ev": "bold #90EE90",
    "footer": "#888888",
    "selected": f"black on {POKEMON_YELLOW}",
    "border": POKEDEX_RED,
    "detail_border": POKEDEX_BLUE,
    "error": "bold red",
}

def type_color(type_name: str) -> str:
    return "#" + TYPE_COLORS.get((type_name or "").lower(), DEFAULT_TYPE_COLOR)

def type_badge(type_name: str) -> Text:
    return Text(f" {type_name.upper()} ", style=f"bold black on {type_color(type_name)}")

def type_label(type_name: str) -> Text:
    return Text(type_name.capitalize(), style=type_color(type_name))
