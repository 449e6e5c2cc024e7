"""PokeAPI access and typed records."""
from .client import PokeAPIClient
__all__ = ["PokeAPIClient"]
