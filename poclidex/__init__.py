"""
poclidex: interactive terminal Pokedex over PokeAPI.

Data can be viewed as it appeared in any of the nine generations; types,
abilities and learnsets are rewritten to match the selected one.
"""
__version__ = "1.0.0"
__all__ = ["__version__"]
