"""
Turn raw Tatoeba results (or pre-normalized JSON) into sentence rows.

A row is only produced when both a Spanish and an English sentence with
non-empty text are available. Difficulty is bucketed by Spanish length.
"""

import json
from dataclasses import dataclass
from pathlib import Path

from spanish_type.variants import (
    coerce_id,
    gather_variants,
    normalize_lang,
    preview_translations,
    summarize_envelope,
    summarize_variant,
    translation_shape,
)

TATOEBA_SOURCE = "tatoeba"
MANUAL_SOURCE = "manual"

EASY_MAX_LENGTH = 40
MEDIUM_MAX_LENGTH = 80


@dataclass
class NormalizedSentence:
    """A Spanish/English sentence pair ready for the seed file.

    :param tatoeba_id: Tatoeba sentence id, unique in the sentences table.
    :param spanish: Trimmed Spanish text.
    :param english: Trimmed English text.
    :param source: Provenance tag ("tatoeba", "manual", ...).
    :param difficulty: One of "easy", "medium", "hard".
    """

    tatoeba_id: int | None
    spanish: str
    english: str
    source: str
    difficulty: str

    def to_dict(self) -> dict:
        return {
            "tatoebaId": self.tatoeba_id,
            "spanish": self.spanish,
            "english": self.english,
            "source": self.source,
            "difficulty": self.difficulty,
        }


def classify_difficulty(sentence: str) -> str:
    """Bucket a Spanish sentence by character length.

    :param sentence: Spanish text.
    :returns: "easy" (<= 40 chars), "medium" (<= 80 chars) or "hard".
    """
    length = len(sentence)
    if length <= EASY_MAX_LENGTH:
        return "easy"
    if length <= MEDIUM_MAX_LENGTH:
        return "medium"
    return "hard"


def _print_record_details(record: dict, variants) -> None:
    translations = record.get("translations")
    shape = translation_shape(translations)
    if shape == "map":
        translation_keys = list(translations.keys())
    elif shape in ("list", "nested"):
        translation_keys = f"array({len(translations)})"
    else:
        translation_keys = "none"
    direct = record.get("directTranslations")
    direct_count = len(direct) if isinstance(direct, list) else 0

    print(f"  Translation metadata: keys={translation_keys} direct={direct_count}")
    print(f"  Raw entry envelope: {summarize_envelope(record)}")
    print(f"  Raw translations preview: {preview_translations(record)}")
    print(f"  Raw JSON dump: {json.dumps(record, ensure_ascii=False, indent=2, default=str)}")
    print(f"  Variants: {[summarize_variant(v) for v in variants]}")


def normalize_sentence(record: dict, verbose: bool = False) -> NormalizedSentence | None:
    """Pick the Spanish and English sentences out of a raw search result.

    The first Spanish and first English variant (in collection order) win.
    The id is taken from the Spanish variant, then the English variant, then
    the result itself.

    :param record: Raw search result from the Tatoeba API.
    :param verbose: If True, print diagnostics for the record.
    :returns: Normalized row, or None if the record has no usable pair.
    """
    variants = gather_variants(record)

    if verbose:
        _print_record_details(record, variants)

    spanish = next((v for v in variants if normalize_lang(v.lang) == "spa"), None)
    english = next((v for v in variants if normalize_lang(v.lang) == "eng"), None)

    if spanish is None or english is None:
        if verbose:
            print(
                "  Skipping entry: missing expected translation "
                f"(spanish={spanish is not None}, english={english is not None})"
            )
        return None

    clean_spanish = (spanish.text or "").strip()
    clean_english = (english.text or "").strip()

    if not clean_spanish or not clean_english:
        if verbose:
            print(f"  Skipping entry: empty text (spanish={clean_spanish!r}, english={clean_english!r})")
        return None

    tatoeba_id = spanish.id
    if tatoeba_id is None:
        tatoeba_id = english.id
    if tatoeba_id is None:
        tatoeba_id = coerce_id(record.get("id"))
    if tatoeba_id is None and verbose:
        print("  Missing Tatoeba id; will be discarded")

    return NormalizedSentence(
        tatoeba_id=tatoeba_id,
        spanish=clean_spanish,
        english=clean_english,
        source=TATOEBA_SOURCE,
        difficulty=classify_difficulty(clean_spanish),
    )


# =============================================================================
# JSON input / output
# =============================================================================


def normalize_from_json(entry) -> NormalizedSentence | None:
    """Build a row from a pre-normalized JSON object.

    Only "english" and "spanish" are required. "tatoebaId" is kept when it is
    an integer, "source" defaults to "manual" and "difficulty" is derived
    from the Spanish text when absent.

    :param entry: One item of the input JSON array.
    :returns: Normalized row, or None if the entry is unusable.
    """
    if not isinstance(entry, dict):
        return None
    if not entry.get("english") or not entry.get("spanish"):
        return None

    spanish = str(entry["spanish"]).strip()
    english = str(entry["english"]).strip()
    if not spanish or not english:
        return None

    tatoeba_id = entry.get("tatoebaId")
    if not isinstance(tatoeba_id, int) or isinstance(tatoeba_id, bool):
        tatoeba_id = None

    return NormalizedSentence(
        tatoeba_id=tatoeba_id,
        spanish=spanish,
        english=english,
        source=str(entry["source"]) if entry.get("source") else MANUAL_SOURCE,
        difficulty=str(entry["difficulty"]) if entry.get("difficulty") else classify_difficulty(spanish),
    )


def load_from_json(path: str | Path) -> list[NormalizedSentence]:
    """Load sentence rows from a JSON array file.

    :param path: Path to a UTF-8 JSON file.
    :returns: Rows for every usable entry.
    :raises FileNotFoundError: If path does not exist.
    :raises ValueError: If the file is not valid JSON or not an array.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError("Expected input JSON to be an array")

    rows = []
    for item in data:
        row = normalize_from_json(item)
        if row:
            rows.append(row)
    return rows


def write_json(rows: list[NormalizedSentence], path: str | Path) -> None:
    """Write rows as a pretty-printed JSON array (readable by load_from_json).

    :param rows: Rows to dump.
    :param path: Output file; parent directories are created.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [row.to_dict() for row in rows]
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
