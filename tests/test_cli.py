import asyncio

import pytest

from builders import raw_pokemon
from poclidex import __version__
from poclidex.cli import bash_completion, build_parser, completion_script, run, zsh_completion
from poclidex.services.pokemon import PokemonService

def test_parser_defaults_and_flags():
    args = build_parser().parse_args(["pikachu", "--log-level", "debug"])
    assert args.pokemon == "pikachu"
    assert args.log_level == "DEBUG"
    assert build_parser().parse_args([]).completion is None

def test_version_flag(capsys):
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["--version"])
    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out

def test_unsupported_shell_rejected():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--completion", "fish"])

def test_completion_scripts_list_names():
    bash = bash_completion(["bulbasaur", "mr-mime"])
    assert 'compgen -W "bulbasaur mr-mime"' in bash
    assert "complete -F _poclidex_completions poclidex" in bash
    zsh = zsh_completion(["bulbasaur"])
    assert "'bulbasaur'" in zsh and "#compdef poclidex" in zsh

def test_completion_script_uses_catalog(api, session):
    api.add(raw_pokemon(1, "bulbasaur"))
    api.add(raw_pokemon(4, "charmander"))
    out = asyncio.run(completion_script("bash", PokemonService(api, session)))
    assert "bulbasaur charmander" in out

def test_debug_colors(capsys, monkeypatch):
    monkeypatch.setenv("POKEDEX_COLORS", "256")
    assert run(["--debug-colors"]) == 0
    assert "Chafa mode" in capsys.readouterr().out
