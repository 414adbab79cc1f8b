"""
Fetch English/Spanish sentence pairs from the public Tatoeba search API.

Pages are requested one at a time with a short pause between them. Many
results carry no usable translation, so the fetcher is allowed to read up to
six times the minimum number of pages before giving up on the target count.
"""

import json
import math
import time
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass

from spanish_type.normalize import NormalizedSentence, normalize_sentence
from spanish_type.variants import summarize_entry

SEARCH_URL = "https://tatoeba.org/eng/api_v0/search"
USER_AGENT = "spanish-type/1.0"
REQUEST_TIMEOUT = 30

MAX_PAGE_SIZE = 100
MIN_PAGES = 5
MAX_PAGE_MULTIPLIER = 6
PAGE_DELAY_SECONDS = 0.4


class TatoebaError(RuntimeError):
    """Raised when the Tatoeba API answers with a non-success status."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"Tatoeba request failed with status {status}: {body}")
        self.status = status
        self.body = body


@dataclass
class FetchOptions:
    """Options for :func:`fetch_sentences`.

    :param limit: Number of unique sentence pairs to collect.
    :param source_lang: Language of the searched sentences.
    :param target_lang: Language the results must be translated to.
    :param max_pages: Safety cap on pages (computed from limit if None).
    :param verbose: If True, print per-page and per-record details.
    :param delay: Seconds to wait between page requests.
    """

    limit: int
    source_lang: str = "eng"
    target_lang: str = "spa"
    max_pages: int | None = None
    verbose: bool = False
    delay: float = PAGE_DELAY_SECONDS


def build_search_url(page: int, page_size: int, source_lang: str, target_lang: str) -> str:
    params = {
        "from": source_lang,
        "to": target_lang,
        "page": page,
        "per_page": page_size,
        "orphans": "no",
        "unapproved": "no",
        "trans_filter": "any",
        "trans_to": target_lang,
        "trans_orphan": "no",
        "trans_unapproved": "no",
        "trans_link": "direct",
        "sort": "random",
    }
    return f"{SEARCH_URL}?{urllib.parse.urlencode(params)}"


def request_page(page: int, page_size: int, source_lang: str, target_lang: str) -> list[dict]:
    """Request one page of search results.

    :param page: 1-based page number.
    :param page_size: Results per page.
    :param source_lang: Source language code.
    :param target_lang: Target language code.
    :returns: The page's results (empty if the response has none).
    :raises TatoebaError: If the API returns a non-success status.
    """
    url = build_search_url(page, page_size, source_lang, target_lang)
    req = urllib.request.Request(
        url, headers={"Accept": "application/json", "User-Agent": USER_AGENT}
    )
    try:
        with urllib.request.urlopen(req, timeout=REQUEST_TIMEOUT) as f:
            payload = json.loads(f.read().decode("utf-8"))
    except urllib.error.HTTPError as e:
        body = e.read().decode("utf-8", errors="replace")
        raise TatoebaError(e.code, body) from e

    results = payload.get("results") if isinstance(payload, dict) else None
    return results if isinstance(results, list) else []


def max_pages_for(limit: int, page_size: int, max_pages: int | None = None) -> int:
    """Page cap for a fetch: explicit value, else 6x the minimum (at least 5)."""
    if max_pages is not None:
        return max_pages
    return max(MIN_PAGES, math.ceil(limit / page_size) * MAX_PAGE_MULTIPLIER)


def fetch_sentences(options: FetchOptions) -> list[NormalizedSentence]:
    """Collect up to options.limit unique sentence pairs from Tatoeba.

    Stops on an empty page, on reaching the limit, or at the page cap.
    Results are deduplicated by Tatoeba id, with later pages replacing
    earlier ones.

    :param options: Fetch options.
    :returns: At most options.limit rows.
    :raises TatoebaError: If any page request fails.
    """
    limit = options.limit
    verbose = options.verbose
    page_size = min(MAX_PAGE_SIZE, limit)
    max_pages = max_pages_for(limit, page_size, options.max_pages)

    collected: dict[int, NormalizedSentence] = {}
    page = 1
    requested = 0

    while len(collected) < limit and page <= max_pages:
        results = request_page(page, page_size, options.source_lang, options.target_lang)
        requested += 1

        if verbose:
            print(
                f"Page {page}/{max_pages} -> {len(results)} results "
                f"(unique so far: {len(collected)}/{limit})"
            )

        if not results:
            break

        for record in results:
            if not isinstance(record, dict):
                continue
            row = normalize_sentence(record, verbose=verbose)
            if row is None:
                continue

            if row.tatoeba_id is None:
                if verbose:
                    print(f"  Skipping entry without tatoeba_id {summarize_entry(record)}")
                continue

            if row.tatoeba_id in collected and verbose:
                print(f"  Duplicate sentence id {row.tatoeba_id}, refreshing value")

            collected[row.tatoeba_id] = row
            if len(collected) >= limit:
                break

        page += 1

        if len(collected) < limit and page <= max_pages and options.delay > 0:
            time.sleep(options.delay)

    if len(collected) < limit:
        print(
            f"Warning: Only collected {len(collected)} unique sentence pairs after "
            f"{requested} pages. You may need to raise --limit, loosen "
            "filters, or supply your own dataset with --input."
        )

    return list(collected.values())[:limit]
