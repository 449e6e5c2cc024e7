"""
Interactive Pokedex viewer.

Two screens: home (search box + result list) and detail (header, tabs and a
sprite panel). Keys are read on a worker thread; everything else, including
every fetch, runs on the event loop. Detail loads carry an id from
LoadTracker so a slow earlier load can never overwrite a newer one.
"""
from __future__ import annotations
import asyncio
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.box import ROUNDED

from poclidex.api.records import AbilityDetail
from poclidex.core.errors import InvalidGeneration, PoclidexError
from poclidex.core.logging import logger
from poclidex.models.pokemon import DisplayEntity
from poclidex.services.generation import GenerationSession
from poclidex.services.images import ImageService
from poclidex.services.moves import MoveRecord
from poclidex.services.pokemon import EvolutionStage, PokemonService
from poclidex.services.search import SearchResult, SearchService
from poclidex.ui import presenters
from poclidex.ui.keys import Key, KeyEvent, read_key
from poclidex.ui.theme import POKEMON_YELLOW, STYLES, type_badge

TABS = ("Overview", "Stats", "Moves", "Evolution")
LIST_SIZE = 15
MOVES_PAGE = 15

class LoadTracker:
    """Monotonic load ids; only the most recent one is current."""
    def __init__(self):
        self._current = 0

    def begin(self) -> int:
        self._current += 1
        return self._current

    def is_current(self, load_id: int) -> bool:
        return load_id == self._current

    @property
    def current(self) -> int:
        return self._current

@dataclass
class DetailState:
    entity: DisplayEntity
    abilities: List[AbilityDetail] = field(default_factory=list)
    moves: List[MoveRecord] = field(default_factory=list)
    evolution: Optional[EvolutionStage] = None
    sprite: str = ""
    tab: int = 0
    moves_offset: int = 0

class PokedexApp:
    def __init__(self, service: PokemonService, search: SearchService, images: Optional[ImageService],
                 session: GenerationSession, console: Optional[Console] = None,
                 key_reader: Callable[[], KeyEvent] = read_key, show_sprites: bool = True):
        self.service = service
        self.search = search
        self.images = images
        self.session = session
        self.console = console or Console()
        self.key_reader = key_reader
        self.show_sprites = show_sprites and images is not None
        self.loads = LoadTracker()

        self.screen = "home"
        self.query = ""
        self.results: List[SearchResult] = []
        self.index = 0
        self.detail: Optional[DetailState] = None
        self.current_name: Optional[str] = None
        self.status = ""
        self.error: Optional[str] = None
        self.show_help = False
        self.running = True
        self._tasks: set = set()
        session.on_change(self._on_generation_change)

    # ------------------------------------------------------------ lifecycle

    async def run(self, initial: Optional[str] = None):
        await self.load_list()
        if initial:
            await self.load_detail(initial)
        self.render()
        loop = asyncio.get_running_loop()
        while self.running:
            try:
                event = await loop.run_in_executor(None, self.key_reader)
            except KeyboardInterrupt:
                break
            self.handle_key(event)
            if self.running:
                self.render()
        for task in list(self._tasks):
            task.cancel()

    async def load_list(self):
        self.status = "Loading Pokemon list..."
        items = await self.service.load_pokemon_list()
        self.search.index_pokemon(items)
        self.status = f"{self.search.total} Pokemon"
        self._refresh_results()

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # ------------------------------------------------------------ loading

    def open_pokemon(self, name_or_id: Union[str, int]) -> asyncio.Task:
        return self._spawn(self._load_and_render(name_or_id, self.loads.begin()))

    async def _load_and_render(self, name_or_id: Union[str, int], load_id: int) -> bool:
        # Background loads finish between key presses, so they draw their own result
        applied = await self.load_detail(name_or_id, load_id)
        if self.running and self.loads.is_current(load_id):
            self.render()
        return applied

    async def load_detail(self, name_or_id: Union[str, int], load_id: Optional[int] = None) -> bool:
        """Load everything the detail screen shows. Returns False when superseded."""
        load_id = load_id if load_id is not None else self.loads.begin()
        self.current_name = str(name_or_id)
        self.status = f"Loading {name_or_id}..."
        self.error = None
        try:
            entity = await self.service.get_pokemon_details(name_or_id)
            if not self.loads.is_current(load_id):
                logger.debug("StaleLoadDiscarded", load_id=load_id, name=name_or_id)
                return False
            view = entity.view_generation or self.session.current()
            abilities, moves = await asyncio.gather(
                asyncio.gather(*(self.service.get_ability_details(a.name, a.is_hidden) for a in entity.abilities)),
                self.service.get_moves(entity.id, view, entity.generation),
            )
            evolution = await self._load_evolution(entity)
            sprite = await self._load_sprite(entity)
        except PoclidexError as e:
            if self.loads.is_current(load_id):
                logger.error("DetailLoadFailed", name=name_or_id, error=str(e))
                self.error = str(e)
                self.status = "Data unavailable"
            return False
        if not self.loads.is_current(load_id):
            logger.debug("StaleLoadDiscarded", load_id=load_id, name=name_or_id)
            return False
        tab = self.detail.tab if self.detail and self.detail.entity.id == entity.id else 0
        self.detail = DetailState(entity, list(abilities), list(moves), evolution, sprite, tab)
        self.current_name = entity.name
        self.screen = "detail"
        self.status = ""
        return True

    async def _load_evolution(self, entity: DisplayEntity) -> Optional[EvolutionStage]:
        if not entity.evolution_chain_url:
            return None
        chain = await self.service.get_evolution_chain(entity)
        return self.service.parse_evolution_chain_structured(chain)

    async def _load_sprite(self, entity: DisplayEntity) -> str:
        if not self.show_sprites or not entity.sprite:
            return ""
        return await self.images.url_to_ascii(entity.sprite)

    def _on_generation_change(self, generation: int):
        self.status = f"Generation {generation}"
        if self.screen == "detail" and self.current_name:
            self.open_pokemon(self.current_name)

    # ------------------------------------------------------------ input

    def handle_key(self, event: KeyEvent):
        if event.key is Key.CTRL_C:
            self.running = False
            return
        if event.key is Key.FUNCTION and event.number is not None:
            self.set_generation(event.number)
            return
        if event.key is Key.CHAR and event.char == "?":
            self.show_help = not self.show_help
            return
        if self.show_help and event.key is Key.ESC:
            self.show_help = False
            return
        if self.screen == "home":
            self._home_key(event)
        else:
            self._detail_key(event)

    def set_generation(self, generation: int):
        try:
            self.session.set_current(generation)
        except InvalidGeneration as e:
            self.status = str(e)

    def _home_key(self, event: KeyEvent):
        if event.key is Key.UP:
            self.index = max(0, self.index - 1)
        elif event.key is Key.DOWN:
            self.index = min(max(0, len(self.results) - 1), self.index + 1)
        elif event.key is Key.ENTER and self.results:
            self.open_pokemon(self.results[self.index].name)
        elif event.key is Key.BACKSPACE:
            self.query = self.query[:-1]
            self._refresh_results()
        elif event.key is Key.ESC:
            self.query = ""
            self._refresh_results()
        elif event.key is Key.CHAR:
            self.query += event.char
            self._refresh_results()

    def _detail_key(self, event: KeyEvent):
        d = self.detail
        if event.key is Key.ESC:
            self.loads.begin()
            self.screen = "home"
            return
        if event.key is Key.CHAR and event.char == "q":
            self.running = False
            return
        if d is None:
            return
        if event.key is Key.TAB:
            d.tab = (d.tab + 1) % len(TABS)
        elif event.key is Key.CHAR and event.char in "1234":
            d.tab = int(event.char) - 1
        elif event.key in (Key.UP, Key.DOWN) and TABS[d.tab] == "Moves":
            step = -1 if event.key is Key.UP else 1
            d.moves_offset = min(max(0, len(d.moves) - MOVES_PAGE), max(0, d.moves_offset + step))
        elif event.key is Key.CHAR and event.char in "cpds" and self.images is not None:
            cycle = {
                "c": self.images.cycle_color_mode,
                "p": self.images.cycle_color_space,
                "d": self.images.cycle_dither_mode,
                "s": self.images.cycle_symbol_set,
            }[event.char]
            cycle()
            self.status = self.images.describe_mode()
            self._spawn(self._rerender_sprite(d))

    async def _rerender_sprite(self, d: DetailState):
        d.sprite = await self._load_sprite(d.entity)
        self.render()

    def _refresh_results(self):
        if self.query:
            self.results = self.search.search(self.query, LIST_SIZE)
        else:
            self.results = []
        self.index = 0

    # ------------------------------------------------------------ rendering

    def render(self):
        self.console.clear()
        if self.show_help:
            self.console.print(Align.center(presenters.render_help()))
            return
        self.console.print(self.home_view() if self.screen == "home" else self.detail_view())

    def _status_line(self) -> Text:
        gen = f"Gen {self.session.current()}"
        line = Text.assemble((f" {gen} ", f"bold black on {POKEMON_YELLOW}"), " ", self.status)
        line.append("   ? help • Ctrl+C quit", style=STYLES["footer"])
        return line

    def home_view(self) -> Group:
        box = Panel(Text(self.query + "▌"), title="Search", border_style=STYLES["name"], box=ROUNDED)
        listing = Table(show_header=False, box=None, expand=True)
        listing.add_column()
        if not self.results:
            hint = "Type to search" if not self.query else "No matches"
            listing.add_row(f"[dim]{hint}[/dim]")
        for i, r in enumerate(self.results):
            row = Text.from_markup(r.highlight)
            if i == self.index:
                row.stylize(STYLES["selected"])
            listing.add_row(row)
        parts = [box, Panel(listing, title="Pokemon", border_style=STYLES["border"])]
        if self.error:
            parts.append(Panel(self.error, title="Error", border_style=STYLES["error"]))
        parts.append(self._status_line())
        return Group(*parts)

    def header(self, entity: DisplayEntity) -> Text:
        gen = entity.view_generation or self.session.current()
        head = Text.assemble(
            (entity.display_name, STYLES["name"]), f"  #{entity.id:04d}  ", (f"(gen {gen})", "dim"), "  ",
        )
        for t in entity.types:
            head.append_text(type_badge(t))
            head.append(" ")
        return head

    def tab_body(self, d: DetailState):
        name = TABS[d.tab]
        if name == "Overview":
            return Group(presenters.render_info(d.entity), Text(""), presenters.render_abilities(d.abilities))
        if name == "Stats":
            return presenters.render_stats(d.entity)
        if name == "Moves":
            return presenters.render_moves(d.moves[d.moves_offset:d.moves_offset + MOVES_PAGE])
        if d.evolution is None:
            return Text("No evolution data.", style="dim")
        return presenters.render_evolution(d.evolution, d.entity.name)

    def detail_view(self):
        d = self.detail
        if d is None:
            body = Text(self.error or self.status or "Loading...", style=STYLES["error"] if self.error else "")
            return Group(body, self._status_line())
        tabs = Text(" ").join(
            Text(f" {i + 1} {t} ", style=STYLES["selected"] if i == d.tab else "bold") for i, t in enumerate(TABS)
        )
        right = Panel(Group(tabs, Text(""), self.tab_body(d)), border_style=STYLES["detail_border"])
        grid = Table.grid(expand=True)
        if d.sprite:
            grid.add_column(ratio=1)
            grid.add_column(ratio=1)
            grid.add_row(Panel(Text.from_ansi(d.sprite), border_style=STYLES["detail_border"]), right)
        else:
            grid.add_column()
            grid.add_row(right)
        parts = [Panel(self.header(d.entity), border_style=STYLES["header"]), grid]
        if self.error:
            parts.append(Panel(self.error, title="Error", border_style=STYLES["error"]))
        parts.append(self._status_line())
        return Group(*parts)

__all__ = ["PokedexApp","LoadTracker","DetailState","TABS"]
