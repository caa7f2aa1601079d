"""Persistence for user data kept alongside the lexicon."""

from .favorites import FavoritesStore, SQLiteFavoritesStore

__all__ = ["FavoritesStore", "SQLiteFavoritesStore"]
