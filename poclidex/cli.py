from __future__ import annotations
import argparse
import asyncio
import sys
from typing import List, Optional, Sequence

from rich.console import Console

from poclidex import __version__
from poclidex.api.client import PokeAPIClient
from poclidex.core.errors import PoclidexError
from poclidex.core.logging import logger, LEVELS
from poclidex.services.generation import GenerationSession
from poclidex.services.images import ImageService
from poclidex.services.pokemon import PokemonService
from poclidex.services.search import SearchService
from poclidex.system.settings import Settings
from poclidex.utils.terminal import terminal_report

EPILOG = """\
Examples:
  poclidex                    Start interactive mode
  poclidex pikachu            View Pikachu's details

Shell completion:
  eval "$(poclidex --completion bash)"
  eval "$(poclidex --completion zsh)"

Keys: ? help, F1-F9 set generation, Ctrl+C quit
"""

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="poclidex",
        description="Interactive terminal Pokedex with generation-aware data",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("pokemon", nargs="?", help="Open this Pokemon's detail page directly")
    parser.add_argument("-v", "--version", action="version", version=__version__)
    parser.add_argument("--completion", choices=("bash", "zsh"), help="Print a shell completion script")
    parser.add_argument("--debug-colors", action="store_true", help="Show terminal color capabilities")
    parser.add_argument("--log-level", choices=LEVELS, type=str.upper, help="Override the configured log level")
    return parser

def bash_completion(names: Sequence[str]) -> str:
    words = " ".join(names)
    return f"""# Bash completion for poclidex
# Add this to your ~/.bashrc:
# eval "$(poclidex --completion bash)"

_poclidex_completions() {{
  local cur="${{COMP_WORDS[COMP_CWORD]}}"

  if [ "${{COMP_CWORD}}" -eq 1 ]; then
    COMPREPLY=( $(compgen -W "{words}" -- "$cur") )
  fi
}}

complete -F _poclidex_completions poclidex
"""

def zsh_completion(names: Sequence[str]) -> str:
    entries = "\n    ".join(f"'{n}'" for n in names)
    return f"""# Zsh completion for poclidex
# Add this to your ~/.zshrc:
# eval "$(poclidex --completion zsh)"

#compdef poclidex

_poclidex() {{
  local -a pokemon_list
  pokemon_list=(
    {entries}
  )

  _describe 'pokemon' pokemon_list
}}

_poclidex
"""

COMPLETIONS = {"bash": bash_completion, "zsh": zsh_completion}

async def completion_script(shell: str, service: PokemonService) -> str:
    items = await service.load_pokemon_list()
    return COMPLETIONS[shell]([p.name for p in items])

async def _main(args: argparse.Namespace, settings: Settings, console: Console) -> int:
    session = GenerationSession()
    async with PokeAPIClient(settings.data.api_base_url, settings.data.request_timeout) as api:
        service = PokemonService(api, session)
        if args.completion:
            sys.stdout.write(await completion_script(args.completion, service))
            return 0
        # Imported here so completion and --debug-colors never touch the terminal driver
        from poclidex.ui.app import PokedexApp
        app = PokedexApp(
            service, SearchService(), ImageService(api, settings), session,
            console=console, show_sprites=settings.data.show_sprites,
        )
        await app.run(args.pokemon)
    return 0

def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.load()
    logger.set_level(args.log_level or settings.data.log_level)
    console = Console()
    if args.debug_colors:
        console.print(terminal_report())
        return 0
    try:
        return asyncio.run(_main(args, settings, console))
    except KeyboardInterrupt:
        return 130
    except PoclidexError as e:
        logger.error("Fatal", error=str(e))
        console.print(f"[bold red]Error:[/bold red] {e}")
        return 1

if __name__ == "__main__":
    sys.exit(run())
