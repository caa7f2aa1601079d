"""Lexicon data model and loading of the pre-built dictionary artifact."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..utils.observability import get_logger
from .errors import LexiconLoadError

_logger = get_logger(__name__).bind(component="lexicon")

# Positional meaning of the comma-separated principal parts.
PRINCIPAL_PART_LABELS: Tuple[str, ...] = ("2sg", "1pl", "2pl")

_HEADWORD_KEYS = ("headword", "lemma")
_GLOSS_KEYS = ("gloss", "definition")
_CLASS_KEYS = ("partOfSpeech", "class", "wordClass")
_PRINCIPAL_PART_KEYS = ("principalParts", "principalPart")
_AUDIO_KEYS = ("audio", "audioRefs", "sound")
_EXAMPLE_KEYS = ("examples", "exampleSentences")


def _first_present(record: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


def _coerce_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_strings(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"expected a string or list, got {type(value).__name__}")
    cleaned = (_coerce_text(item) for item in value)
    return [item for item in cleaned if item]


@dataclass(frozen=True)
class Sense:
    """One numbered meaning of a headword.

    ``part_of_speech`` holds the class label exactly as it appears in the
    data, e.g. ``"-LI/CHA-"`` or ``"AM-p"``.
    """

    gloss: str
    part_of_speech: Optional[str] = None


@dataclass(frozen=True)
class ExampleSentence:
    source_text: Optional[str] = None
    translation: Optional[str] = None


@dataclass(frozen=True)
class LexiconEntry:
    """A dictionary entry; immutable once loaded."""

    headword: str
    senses: Tuple[Sense, ...] = ()
    principal_parts: Optional[str] = None
    derivation: Optional[str] = None
    notes: Optional[str] = None
    related_terms: FrozenSet[str] = field(default_factory=frozenset)
    audio_refs: Tuple[str, ...] = ()
    examples: Tuple[ExampleSentence, ...] = ()

    @property
    def glosses(self) -> Tuple[str, ...]:
        return tuple(sense.gloss for sense in self.senses)

    @property
    def joined_gloss(self) -> str:
        return "; ".join(self.glosses)

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_refs)

    def principal_part_forms(self) -> Dict[str, str]:
        """Map each principal part to its positional label (``2sg``, ``1pl``, ...)."""

        forms = _coerce_strings((self.principal_parts or "").split(","))
        labelled: Dict[str, str] = {}
        for index, form in enumerate(forms):
            if index < len(PRINCIPAL_PART_LABELS):
                label = PRINCIPAL_PART_LABELS[index]
            else:
                label = f"part{index + 1}"
            labelled[label] = form
        return labelled

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headword": self.headword,
            "senses": [
                {"gloss": sense.gloss, "partOfSpeech": sense.part_of_speech}
                for sense in self.senses
            ],
            "principalParts": self.principal_parts,
            "derivation": self.derivation,
            "notes": self.notes,
            "relatedTerms": sorted(self.related_terms),
            "audio": list(self.audio_refs),
            "examples": [
                {"sourceText": example.source_text, "translation": example.translation}
                for example in self.examples
            ],
        }

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "LexiconEntry":
        """Build an entry from either the canonical or the legacy record shape.

        Legacy records carry ``lemma``, a ``;``-separated ``definition`` and a
        single top-level ``class`` label; canonical ones carry ``headword`` and
        a ``senses`` list.
        """

        if not isinstance(record, Mapping):
            raise TypeError(f"entry must be an object, got {type(record).__name__}")

        headword = _coerce_text(_first_present(record, _HEADWORD_KEYS))
        if headword is None:
            raise ValueError("entry has no headword")

        default_class = _coerce_text(_first_present(record, _CLASS_KEYS))
        raw_senses = record.get("senses")
        if raw_senses is None:
            raw_senses = record.get("definition")

        examples = []
        for item in record.get(_EXAMPLE_KEYS[0]) or record.get(_EXAMPLE_KEYS[1]) or ():
            if not isinstance(item, Mapping):
                raise TypeError("example sentences must be objects")
            examples.append(
                ExampleSentence(
                    source_text=_coerce_text(item.get("sourceText", item.get("alabama"))),
                    translation=_coerce_text(item.get("translation", item.get("english"))),
                )
            )

        return cls(
            headword=headword,
            senses=_parse_senses(raw_senses, default_class),
            principal_parts=_coerce_text(_first_present(record, _PRINCIPAL_PART_KEYS)),
            derivation=_coerce_text(record.get("derivation")),
            notes=_coerce_text(record.get("notes")),
            related_terms=frozenset(_coerce_strings(record.get("relatedTerms"))),
            audio_refs=tuple(_coerce_strings(_first_present(record, _AUDIO_KEYS))),
            examples=tuple(examples),
        )


def _parse_senses(raw: Any, default_class: Optional[str]) -> Tuple[Sense, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return tuple(
            Sense(gloss=gloss, part_of_speech=default_class)
            for gloss in _coerce_strings(raw.split(";"))
        )
    if not isinstance(raw, (list, tuple)):
        raise TypeError(f"senses must be a string or list, got {type(raw).__name__}")

    senses: List[Sense] = []
    for item in raw:
        if isinstance(item, str):
            gloss, label = _coerce_text(item), default_class
        elif isinstance(item, Mapping):
            gloss = _coerce_text(_first_present(item, _GLOSS_KEYS))
            label = _coerce_text(_first_present(item, _CLASS_KEYS)) or default_class
        else:
            raise TypeError(f"sense must be a string or object, got {type(item).__name__}")
        if gloss:
            senses.append(Sense(gloss=gloss, part_of_speech=label))
    return tuple(senses)


class Lexicon:
    """Ordered, read-only snapshot of every entry in the dictionary.

    Headwords are not unique; two entries sharing a headword are distinct
    items identified by their position.
    """

    def __init__(self, entries: Iterable[LexiconEntry] = ()) -> None:
        self._entries: Tuple[LexiconEntry, ...] = tuple(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LexiconEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> LexiconEntry:
        return self._entries[index]

    @property
    def entries(self) -> Tuple[LexiconEntry, ...]:
        return self._entries

    def find(self, headword: str) -> List[LexiconEntry]:
        return [entry for entry in self._entries if entry.headword == headword]

    def back_references(self, headword: str) -> List[LexiconEntry]:
        """Entries whose related terms point at ``headword``."""

        return [
            entry
            for entry in self._entries
            if headword in entry.related_terms and entry.headword != headword
        ]

    def related_entries(self, entry: LexiconEntry) -> List[LexiconEntry]:
        """Entries linked to ``entry`` in either direction, in lexicon order."""

        related: List[LexiconEntry] = []
        for candidate in self._entries:
            if candidate is entry or candidate.headword == entry.headword:
                continue
            if candidate.headword in entry.related_terms or entry.headword in candidate.related_terms:
                related.append(candidate)
        return related


def parse_lexicon(payload: Any) -> Lexicon:
    """Build a :class:`Lexicon` from decoded JSON; any defect is fatal."""

    records = payload.get("words") if isinstance(payload, Mapping) else payload
    if not isinstance(records, list):
        raise LexiconLoadError("lexicon must be a list of entries or an object with a 'words' list")

    entries: List[LexiconEntry] = []
    for index, record in enumerate(records):
        try:
            entries.append(LexiconEntry.from_dict(record))
        except (TypeError, ValueError) as exc:
            raise LexiconLoadError(f"entry {index} is malformed: {exc}") from exc
    return Lexicon(entries)


def load_lexicon(path: Path | str) -> Lexicon:
    """Read and parse the lexicon artifact at ``path``."""

    lexicon_path = Path(path)
    try:
        with lexicon_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        _logger.error(
            "Lexicon could not be read",
            context={"path": str(lexicon_path), "error": str(exc)},
        )
        raise LexiconLoadError(f"cannot read lexicon {lexicon_path}: {exc}") from exc

    lexicon = parse_lexicon(payload)
    _logger.info(
        "Lexicon loaded",
        context={"path": str(lexicon_path), "entries": len(lexicon)},
    )
    return lexicon


__all__ = [
    "ExampleSentence",
    "Lexicon",
    "LexiconEntry",
    "PRINCIPAL_PART_LABELS",
    "Sense",
    "load_lexicon",
    "parse_lexicon",
]
