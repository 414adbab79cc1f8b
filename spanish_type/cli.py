"""
CLI tools for building the SpanishType sentence seed.

Commands:
    ingest - Fetch (or load) English/Spanish sentence pairs and write an SQL seed

Examples::

    # Fetch 200 sentences from Tatoeba and write SQL to data/seed.sql
    spanish-type ingest

    # Build SQL from a pre-filtered JSON dataset without hitting the API
    spanish-type ingest --input data/sentences.json

    # Fetch 500 sentences, keep a JSON dump, write SQL to a custom file
    spanish-type ingest --limit 500 --json-out data/raw.json --output data/seed.sql
"""

import sys
from pathlib import Path
from typing import Annotated

import cyclopts

from spanish_type.normalize import load_from_json, write_json
from spanish_type.seed import build_sql_file, write_seed
from spanish_type.tatoeba import FetchOptions, fetch_sentences

DEFAULT_LIMIT = 200
DEFAULT_BATCH_SIZE = 100
DEFAULT_OUTPUT = Path("data") / "seed.sql"

D1_DATABASE = "spanish_type"
WRANGLER_CONFIG = "worker/wrangler.toml"

app = cyclopts.App(
    name="spanish-type", help="Build the SpanishType sentence seed from Tatoeba"
)


def _check_positive(name: str, value: int | None) -> None:
    if value is not None and value <= 0:
        raise ValueError(f"Expected {name} to be a positive integer")


def _print_apply_instructions(output: Path, wrap_transaction: bool) -> None:
    command = f"npx wrangler d1 execute {D1_DATABASE} --config {WRANGLER_CONFIG}"
    print("\nApply to D1 with:")
    if wrap_transaction:
        print("  # Local / dev instance")
        print(f"  {command} --local --file {output}")
        print("\n  # Remote (regenerate with --no-transaction first)")
        print(f"  {command} --remote --file {output}")
    else:
        print(f"  {command} --remote --file {output}")


@app.command
def ingest(
    *,
    limit: int = DEFAULT_LIMIT,
    batch_size: int = DEFAULT_BATCH_SIZE,
    from_lang: Annotated[str, cyclopts.Parameter(name="--from")] = "eng",
    to_lang: Annotated[str, cyclopts.Parameter(name="--to")] = "spa",
    input_path: Annotated[Path | None, cyclopts.Parameter(name="--input")] = None,
    output: Path = DEFAULT_OUTPUT,
    json_out: Path | None = None,
    max_pages: int | None = None,
    transaction: bool = True,
    verbose: bool = False,
):
    """Fetch or load sentence pairs and write an SQL seed file.

    :param limit: Total sentence pairs to collect.
    :param batch_size: How many rows per SQL INSERT.
    :param from_lang: Source language code.
    :param to_lang: Target language code.
    :param input_path: JSON file to use instead of hitting the API.
    :param output: SQL output file.
    :param json_out: Optional JSON dump of normalized sentences.
    :param max_pages: Safety cap on API pages to fetch (auto-calculated if omitted).
    :param transaction: Wrap INSERTs in BEGIN/COMMIT (disable for remote D1 uploads).
    :param verbose: If True, print progress details.
    """
    _check_positive("--limit", limit)
    _check_positive("--batch-size", batch_size)
    _check_positive("--max-pages", max_pages)

    if from_lang != "eng" or to_lang != "spa":
        print(
            "Warning: sentences are normalized as English/Spanish pairs. "
            "Other language combinations may require additional adjustments."
        )

    if input_path is not None:
        sentences = load_from_json(input_path)
    else:
        sentences = fetch_sentences(
            FetchOptions(
                limit=limit,
                source_lang=from_lang,
                target_lang=to_lang,
                max_pages=max_pages,
                verbose=verbose,
            )
        )

    if not sentences:
        raise ValueError(
            "No sentences were collected. Try increasing --limit or providing a dataset."
        )

    if verbose:
        print(f"Collected {len(sentences)} unique sentence pairs.")

    sql = build_sql_file(sentences, batch_size, wrap_transaction=transaction)
    write_seed(sql, output)
    print(f"Wrote SQL seed to {output}")

    if json_out is not None:
        write_json(sentences, json_out)
        print(f"Wrote normalized JSON to {json_out}")

    _print_apply_instructions(output, transaction)


def main() -> None:
    """Main entry point. Invokes the cyclopts app."""
    try:
        app()
    except Exception as e:
        print(f"Ingestion failed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
