"""
SpanishType tools - build the sentence seed for the SpanishType typing game.

Core types:
    NormalizedSentence - A Spanish/English pair ready for the seed file
    Variant            - A candidate sentence pulled out of a Tatoeba result

Modules:
    variants  - Flatten Tatoeba translation structures into variants
    normalize - Select Spanish/English pairs, JSON input/output
    seed      - Batched upsert SQL for the sentences table
    tatoeba   - Paged fetcher for the Tatoeba search API
    cli       - Command-line interface
"""

from spanish_type.normalize import (
    NormalizedSentence,
    classify_difficulty,
    load_from_json,
    normalize_from_json,
    normalize_sentence,
    write_json,
)
from spanish_type.seed import build_sql_file, write_seed
from spanish_type.tatoeba import FetchOptions, TatoebaError, fetch_sentences
from spanish_type.variants import Variant, gather_variants, normalize_lang

__all__ = [
    "NormalizedSentence",
    "Variant",
    "FetchOptions",
    "TatoebaError",
    "gather_variants",
    "normalize_lang",
    "normalize_sentence",
    "normalize_from_json",
    "classify_difficulty",
    "load_from_json",
    "write_json",
    "build_sql_file",
    "write_seed",
    "fetch_sentences",
]
