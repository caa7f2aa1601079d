"""Application wiring for the Alabama dictionary."""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from alabama_dictionary.core import (
    DEFAULT_PAGE_SIZE,
    Lexicon,
    LexiconEntry,
    LexiconLoadError,
    ResultPage,
    SearchMode,
    load_lexicon,
)
from alabama_dictionary.utils.logging_config import configure_logging
from alabama_dictionary.utils.observability import get_logger
from alabama_dictionary.utils.telemetry import StructuredTelemetry, TelemetryLogger

from alabama_dictionary.app.data.favorites import FavoritesStore, SQLiteFavoritesStore
from alabama_dictionary.app.services.result_formatter import DictionaryResultFormatter
from alabama_dictionary.app.services.search_service import SearchRequest, SearchService


def _env_int(env: Mapping[str, str], name: str, default: int, minimum: int) -> int:
    try:
        value = int(env.get(name, default))
    except (TypeError, ValueError):
        return default
    return value if value >= minimum else default


@dataclass(frozen=True)
class DictionarySettings:
    lexicon_path: str = "dict.json"
    favorites_path: str = "favorites.db"
    page_size: int = DEFAULT_PAGE_SIZE
    max_workers: int = 2
    debounce_ms: int = 0
    log_level: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "DictionarySettings":
        """Read ``ALABAMA_DICT_*`` variables; bad values fall back to defaults."""

        env = os.environ if env is None else env
        return cls(
            lexicon_path=env.get("ALABAMA_DICT_LEXICON") or cls.lexicon_path,
            favorites_path=env.get("ALABAMA_DICT_FAVORITES") or cls.favorites_path,
            page_size=_env_int(env, "ALABAMA_DICT_PAGE_SIZE", DEFAULT_PAGE_SIZE, 1),
            max_workers=_env_int(env, "ALABAMA_DICT_WORKERS", 2, 1),
            debounce_ms=_env_int(env, "ALABAMA_DICT_DEBOUNCE_MS", 0, 0),
            log_level=env.get("ALABAMA_DICT_LOG_LEVEL") or None,
        )


class DictionaryApp:
    """High-level facade bundling the lexicon, search and favorites."""

    def __init__(
        self,
        settings: Optional[DictionarySettings] = None,
        *,
        lexicon: Optional[Lexicon] = None,
        search_service: Optional[SearchService] = None,
        favorites: Optional[FavoritesStore] = None,
        formatter: Optional[DictionaryResultFormatter] = None,
        telemetry: Optional[StructuredTelemetry] = None,
    ) -> None:
        self.settings = settings or DictionarySettings.from_env()
        self._logger = get_logger(__name__).bind(component="app_facade")

        if lexicon is None:
            try:
                lexicon = load_lexicon(self.settings.lexicon_path)
            except LexiconLoadError as exc:
                self._logger.error(
                    "Lexicon load failed",
                    context={"path": self.settings.lexicon_path, "error": str(exc)},
                )
                raise
        self.lexicon = lexicon

        self.telemetry = telemetry or StructuredTelemetry(listeners=[TelemetryLogger()])
        self.telemetry.start_trace("dictionary_session")
        self.search_service = search_service or SearchService(
            lexicon,
            page_size=self.settings.page_size,
            max_workers=self.settings.max_workers,
            debounce_seconds=self.settings.debounce_ms / 1000.0,
            telemetry=self.telemetry,
        )
        self.favorites = favorites or SQLiteFavoritesStore(self.settings.favorites_path)
        self.formatter = formatter or DictionaryResultFormatter()

        self._logger.info(
            "Application dependencies wired",
            context={
                "entries": len(self.lexicon),
                "page_size": self.settings.page_size,
                "favorites_path": self.settings.favorites_path,
            },
        )

    # Search -------------------------------------------------------------------
    def search(
        self,
        text: str,
        mode: SearchMode = SearchMode.LITERAL,
        audio_only: bool = False,
    ) -> ResultPage:
        return self.search_service.search(text, mode=mode, audio_only=audio_only)

    def submit(
        self,
        text: str,
        mode: SearchMode = SearchMode.LITERAL,
        audio_only: bool = False,
    ) -> SearchRequest:
        return self.search_service.submit(text, mode=mode, audio_only=audio_only)

    def page(self, offset: int, count: Optional[int] = None) -> Tuple[LexiconEntry, ...]:
        return self.search_service.page(offset, count)

    def step(self, delta: int) -> ResultPage:
        return self.search_service.step(delta)

    def format_page(self, page: ResultPage, query: Optional[str] = None) -> str:
        return self.formatter.format_page(page, query)

    # Entries ------------------------------------------------------------------
    def entry_details(self, entry: LexiconEntry) -> Dict[str, Any]:
        """Everything an entry view shows, including linked entries."""

        return {
            "entry": entry,
            "senses": list(enumerate(entry.senses, start=1)),
            "principal_parts": entry.principal_part_forms(),
            "related": self.lexicon.related_entries(entry),
            "referenced_by": self.lexicon.back_references(entry.headword),
            "is_favorite": self.favorites.contains(entry.headword),
        }

    def format_entry(self, entry: LexiconEntry) -> str:
        return self.formatter.format_entry(entry, self.lexicon.related_entries(entry))

    # Favorites ----------------------------------------------------------------
    def add_favorite(self, entry: LexiconEntry) -> bool:
        return self.favorites.add(entry)

    def remove_favorite(self, headword: str) -> bool:
        return self.favorites.remove(headword)

    def list_favorites(self) -> List[LexiconEntry]:
        return self.favorites.list()

    def close(self) -> None:
        self.search_service.shutdown()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="alabama-dictionary",
        description="Search the Alabama/English dictionary.",
    )
    parser.add_argument("query", nargs="?", default="", help="search text, may include #tags")
    parser.add_argument("--pattern", action="store_true", help="treat the query as a C/V pattern")
    parser.add_argument("--audio-only", action="store_true", help="only entries with audio")
    parser.add_argument("--offset", type=int, default=0, help="first result to show")
    parser.add_argument("--lexicon", help="path to the lexicon JSON file")
    parser.add_argument("--favorites", help="path to the favorites database")
    parser.add_argument("--log-level", help="logging level (default from ALABAMA_DICT_LOG_LEVEL)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = DictionarySettings.from_env()
    overrides = {
        "lexicon_path": args.lexicon or settings.lexicon_path,
        "favorites_path": args.favorites or settings.favorites_path,
        "log_level": args.log_level or settings.log_level,
    }
    settings = replace(settings, **overrides)
    configure_logging(settings.log_level or "WARNING")

    try:
        app = DictionaryApp(settings)
    except LexiconLoadError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        mode = SearchMode.PATTERN if args.pattern else SearchMode.LITERAL
        page = app.search(args.query, mode=mode, audio_only=args.audio_only)
        if args.offset:
            page = app.step(args.offset)
        print(app.format_page(page, args.query))
    finally:
        app.close()
    return 0


__all__ = ["DictionaryApp", "DictionarySettings", "main"]
