"""
Collect candidate translation variants from raw Tatoeba search results.

The Tatoeba search API is not consistent about where translations live in a
result. Depending on the query mode a result may carry:

- ``directTranslations``: a flat list of entries
- ``translations``: one of
    - a map of language code to a list of entries  ("map")
    - a flat list of entries                      ("list")
    - a list of lists of entries                  ("nested")

Entries themselves keep their fields either at the top level or under a
``sentence`` sub-object, and the language may be named ``lang`` or
``lang_code``. Everything is flattened into :class:`Variant` objects.
"""

import json
from dataclasses import dataclass

ISO2_TO_ISO3 = {
    "en": "eng",
    "es": "spa",
    "fr": "fra",
    "pt": "por",
    "de": "deu",
    "it": "ita",
}


@dataclass
class Variant:
    """A candidate sentence in one language.

    :param id: Tatoeba sentence id (None if the raw record had none).
    :param text: Sentence text, untrimmed.
    :param lang: Language code as given by the API (2 or 3 letters).
    """

    id: int | None
    text: str
    lang: str


def normalize_lang(lang: str | None) -> str | None:
    """Normalize a language code to lowercase ISO 639-3.

    :param lang: Language code such as "es", "ES" or "spa".
    :returns: Three-letter code, or None if lang is empty.
    """
    if not lang:
        return None
    lower = lang.lower()
    if len(lower) == 2:
        return ISO2_TO_ISO3.get(lower, lower)
    if len(lower) == 3:
        return lower
    return lower[:3]


def coerce_id(value) -> int | None:
    """Coerce an API id (int or numeric string) to int, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def coerce_translation(entry) -> Variant | None:
    """Coerce one raw translation entry into a Variant.

    :param entry: Raw entry dict from the API.
    :returns: Variant, or None if id, text or language is missing.
    """
    if not isinstance(entry, dict):
        return None

    sentence = entry.get("sentence")
    if not isinstance(sentence, dict):
        sentence = {}

    if entry.get("id") is not None:
        sentence_id = coerce_id(entry["id"])
    else:
        sentence_id = coerce_id(sentence.get("id"))

    text = entry.get("text")
    if not isinstance(text, str):
        text = sentence.get("text")

    lang = entry.get("lang")
    if not isinstance(lang, str):
        lang = entry.get("lang_code")
    if not isinstance(lang, str):
        lang = sentence.get("lang")

    if sentence_id is None:
        return None
    if not isinstance(text, str) or not text.strip():
        return None
    if not isinstance(lang, str) or not lang:
        return None
    return Variant(id=sentence_id, text=text, lang=lang)


def translation_shape(translations) -> str:
    """Classify a raw ``translations`` value.

    :returns: One of "map", "list", "nested" or "none".
    """
    if isinstance(translations, dict):
        return "map"
    if isinstance(translations, list):
        if any(isinstance(item, list) for item in translations):
            return "nested"
        return "list"
    return "none"


def flatten_translations(translations) -> list[Variant]:
    """Flatten any supported translations shape into a list of Variants.

    :param translations: Map, list, or list of lists of raw entries (or None).
    :returns: Coerced variants in input order; invalid entries are dropped.
    """
    shape = translation_shape(translations)
    raw = []
    if shape == "map":
        for items in translations.values():
            if isinstance(items, list):
                raw.extend(items)
    elif shape == "nested":
        for item in translations:
            if isinstance(item, list):
                raw.extend(item)
            else:
                raw.append(item)
    elif shape == "list":
        raw.extend(translations)

    variants = []
    for item in raw:
        variant = coerce_translation(item)
        if variant:
            variants.append(variant)
    return variants


def gather_variants(record: dict) -> list[Variant]:
    """Collect every candidate variant of a raw search result.

    The result's own sentence comes first, then direct translations, then
    the generic translations field.

    :param record: Raw search result.
    :returns: Ordered list of variants.
    """
    text = record.get("text")
    lang = record.get("lang")
    variants = [
        Variant(
            id=coerce_id(record.get("id")),
            text=text if isinstance(text, str) else "",
            lang=lang if isinstance(lang, str) else "",
        )
    ]
    variants.extend(flatten_translations(record.get("directTranslations")))
    variants.extend(flatten_translations(record.get("translations")))

    # Some query modes return translations as groups; scan the groups again
    # if nothing was found on the first pass.
    translations = record.get("translations")
    if len(variants) == 1 and isinstance(translations, list):
        for group in translations:
            if not isinstance(group, list):
                continue
            for item in group:
                variant = coerce_translation(item)
                if variant:
                    variants.append(variant)

    return variants


# =============================================================================
# Verbose diagnostics
# =============================================================================


def truncate_text(text: str, width: int = 40) -> str:
    """Shorten text to width characters, ending with '...' when cut."""
    if len(text) > width:
        return f"{text[:width - 3]}..."
    return text


def summarize_variant(variant: Variant) -> dict:
    return {
        "id": variant.id,
        "lang": normalize_lang(variant.lang) or variant.lang,
        "text": truncate_text(variant.text or "", 60),
    }


def summarize_entry(record: dict) -> dict:
    text = record.get("text")
    lang = record.get("lang")
    return {
        "id": record.get("id"),
        "lang": normalize_lang(lang) if isinstance(lang, str) else lang,
        "text": truncate_text(text if isinstance(text, str) else "", 60),
    }


def summarize_envelope(record: dict) -> dict:
    return {
        "id": record.get("id"),
        "lang": record.get("lang"),
        "hasSentence": bool(record.get("sentence")),
        "keys": sorted(record.keys()),
    }


def _preview_item(item) -> dict:
    if not isinstance(item, dict):
        return {"value": truncate_text(json.dumps(item, ensure_ascii=False, default=str))}
    sentence = item.get("sentence") if isinstance(item.get("sentence"), dict) else {}
    text = item.get("text")
    if not isinstance(text, str):
        text = sentence.get("text") if isinstance(sentence.get("text"), str) else ""
    return {
        "id": item.get("id", sentence.get("id")),
        "lang": item.get("lang") or item.get("lang_code") or sentence.get("lang"),
        "textPreview": truncate_text(text),
        "hasSentence": bool(sentence),
        "keys": sorted(item.keys()),
    }


def preview_translations(record: dict) -> list[dict]:
    """Sample up to three raw entries from each translation group.

    :param record: Raw search result.
    :returns: List of {"label", "sample"} dicts.
    """
    preview = []

    def push_items(items, label: str) -> None:
        if not isinstance(items, list) or not items:
            return
        preview.append({"label": label, "sample": [_preview_item(i) for i in items[:3]]})

    push_items(record.get("directTranslations"), "direct")

    translations = record.get("translations")
    if isinstance(translations, list):
        push_items(translations, "translations_array")
    elif isinstance(translations, dict):
        for key, items in translations.items():
            push_items(items, f"translations.{key}")

    return preview
