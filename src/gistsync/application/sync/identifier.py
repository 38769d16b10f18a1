"""
Identifier derivation - the only join key between a gist and its mirrors.

The identifier is computed from the gist alone so that every run, on every
target, finds the same counterpart again.
"""

import re

from ...core.domain.entities import SourceItem


MAX_IDENTIFIER_LENGTH = 50
FALLBACK_ID_LENGTH = 8

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_DASH_RUNS = re.compile(r"-+")


def sanitize(text: str) -> str:
    """
    Reduce free text to a lowercase slug of [a-z0-9-].

    Runs of dashes collapse to one, leading and trailing dashes are dropped,
    then the result is cut to 50 characters.
    """
    slug = _NON_ALNUM.sub("-", text.lower())
    slug = _DASH_RUNS.sub("-", slug).strip("-")
    return slug[:MAX_IDENTIFIER_LENGTH]


def derive_identifier(item: SourceItem) -> str:
    """
    Derive the stable identifier of a gist.

    Rules, first match wins:
    1. the sanitized description, if the description is not empty
    2. the first file name without its extension
    3. the first 8 characters of the gist id

    A description made only of punctuation sanitizes to nothing and falls
    through to rule 2. A dot-file such as ``.bashrc`` keeps its whole name.
    """
    # gist-sync.sh returned an empty identifier for a punctuation-only
    # description and for a dot-file stem. Snippets it mirrored under those
    # names are not found again, so a new one is created under the fallback name.
    if item.description:
        slug = sanitize(item.description)
        if slug:
            return slug

    if item.files:
        first = item.files[0]
        return first.stem or first.filename

    return item.id[:FALLBACK_ID_LENGTH]
