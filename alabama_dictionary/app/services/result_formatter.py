"""Plain-text rendering of search results and entry details."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from alabama_dictionary.core import LexiconEntry, ResultPage


class DictionaryResultFormatter:
    """Render result pages the way the results list shows them."""

    def format_range(self, page: ResultPage) -> str:
        if not page.total_count:
            return "0 results"
        return f"{page.offset + 1}-{page.end} of {page.total_count} results"

    def format_senses(self, entry: LexiconEntry) -> List[str]:
        lines: List[str] = []
        for index, sense in enumerate(entry.senses, start=1):
            label = f" [{sense.part_of_speech}]" if sense.part_of_speech else ""
            lines.append(f"  {index}. {sense.gloss}{label}")
        return lines

    def format_page(self, page: ResultPage, query: Optional[str] = None) -> str:
        if not page.total_count:
            if query:
                return f"No entries found for '{query}'."
            return "No entries found."
        if not page.items:
            return f"{page.total_count} results, none on this page"

        lines = [self.format_range(page)]
        for entry in page.items:
            marker = " ♪" if entry.has_audio else ""
            lines.append(f"{entry.headword}{marker}")
            lines.extend(self.format_senses(entry))
        return "\n".join(lines)

    def format_entry(
        self,
        entry: LexiconEntry,
        related: Sequence[LexiconEntry] = (),
    ) -> str:
        lines = [entry.headword]
        lines.extend(self.format_senses(entry))

        forms = entry.principal_part_forms()
        if forms:
            lines.append("Principal parts: " + ", ".join(f"{label} {form}" for label, form in forms.items()))
        if entry.derivation:
            lines.append(f"Derivation: {entry.derivation}")
        if entry.notes:
            lines.append(f"Notes: {entry.notes}")
        for example in entry.examples:
            pair = [text for text in (example.source_text, example.translation) if text]
            if pair:
                lines.append("Example: " + " / ".join(pair))
        headwords = _unique(item.headword for item in related)
        if headwords:
            lines.append("Related: " + ", ".join(headwords))
        return "\n".join(lines)


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


__all__ = ["DictionaryResultFormatter"]
