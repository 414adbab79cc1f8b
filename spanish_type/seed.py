"""
Build the SQL seed file for the ``sentences`` table.

Rows are written as batched multi-row upserts keyed on ``tatoeba_id``; a
re-ingested sentence overwrites its text, source and difficulty and refreshes
``updated_at``.
"""

from pathlib import Path

from spanish_type.normalize import NormalizedSentence

UPSERT_TEMPLATE = """INSERT INTO sentences (tatoeba_id, spanish, english, source, difficulty)
VALUES
  {values}
ON CONFLICT(tatoeba_id) DO UPDATE SET
  spanish = excluded.spanish,
  english = excluded.english,
  source = excluded.source,
  difficulty = excluded.difficulty,
  updated_at = CURRENT_TIMESTAMP;"""

BEGIN_STATEMENT = "BEGIN TRANSACTION;"
COMMIT_STATEMENT = "COMMIT;"


def chunk(items: list, size: int) -> list[list]:
    """Split items into consecutive batches of at most size elements.

    :param items: Items to split; order is preserved.
    :param size: Batch size, must be positive.
    :returns: List of batches (the last may be shorter).
    """
    if size <= 0:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [items[i:i + size] for i in range(0, len(items), size)]


def quote(value: str) -> str:
    """Render a string as a single-quoted SQL literal."""
    escaped = value.replace("'", "''")
    return f"'{escaped}'"


def _row_values(row: NormalizedSentence) -> str:
    parts = [
        "NULL" if row.tatoeba_id is None else str(row.tatoeba_id),
        quote(row.spanish),
        quote(row.english),
        quote(row.source),
        quote(row.difficulty),
    ]
    return f"({', '.join(parts)})"


def build_sql_file(
    rows: list[NormalizedSentence],
    batch_size: int,
    wrap_transaction: bool = True,
) -> str:
    """Build the seed SQL for a list of rows.

    Remote apply pathways manage their own transactions; pass
    wrap_transaction=False for those.

    :param rows: Deduplicated sentence rows.
    :param batch_size: Rows per INSERT statement.
    :param wrap_transaction: If True, bracket statements with BEGIN/COMMIT.
    :returns: SQL text ending with a newline.
    :raises ValueError: If rows is empty.
    """
    if not rows:
        raise ValueError("No sentence rows to write. Fetch or supply data first.")

    statements = []
    if wrap_transaction:
        statements.append(BEGIN_STATEMENT)

    for group in chunk(rows, batch_size):
        values = ",\n  ".join(_row_values(row) for row in group)
        statements.append(UPSERT_TEMPLATE.format(values=values))

    if wrap_transaction:
        statements.append(COMMIT_STATEMENT)

    return "\n\n".join(statements) + "\n"


def write_seed(sql: str, path: str | Path) -> None:
    """Write SQL text to path, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(sql, encoding="utf-8")
