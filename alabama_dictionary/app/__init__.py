"""Application layer: search orchestration, favorites and wiring."""

from .app import DictionaryApp, DictionarySettings, main

__all__ = ["DictionaryApp", "DictionarySettings", "main"]
