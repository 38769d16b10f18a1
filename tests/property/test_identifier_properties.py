"""
Property-based tests for identifier derivation and source filters.

Tests invariants for:
- sanitize output alphabet and length
- derive_identifier determinism and fallbacks
- apply_filters ordering and the ID allow-list
"""

import re

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from gistsync.application.sync import (
    MAX_IDENTIFIER_LENGTH,
    apply_filters,
    derive_identifier,
    sanitize,
)
from gistsync.core.domain.entities import SnippetFile, SourceItem
from gistsync.core.domain.enums import VisibilityFilter
from gistsync.core.ports.config_provider import SourceFilters


pytestmark = pytest.mark.property

SLUG = re.compile(r"^[a-z0-9-]*$")

filenames = st.text(min_size=1, max_size=30).filter(lambda s: s.strip() and "/" not in s)
gist_ids = st.text(alphabet="0123456789abcdef", min_size=1, max_size=32)


@st.composite
def source_items(draw, gist_id=None):
    return SourceItem(
        id=gist_id or draw(gist_ids),
        description=draw(st.one_of(st.none(), st.text(max_size=80))),
        files=tuple(
            SnippetFile(filename=name, content="")
            for name in draw(st.lists(filenames, max_size=3))
        ),
        is_public=draw(st.booleans()),
        updated_at=draw(st.sampled_from(["2023-06-01", "2024-01-15", "2024-09-30"])),
    )


# =============================================================================
# sanitize
# =============================================================================


class TestSanitizeProperties:
    """Property tests for sanitize."""

    @given(st.text())
    def test_output_alphabet(self, text):
        assert SLUG.match(sanitize(text))

    @given(st.text())
    def test_output_length(self, text):
        assert len(sanitize(text)) <= MAX_IDENTIFIER_LENGTH

    @given(st.text())
    def test_no_dash_runs_or_leading_dash(self, text):
        slug = sanitize(text)
        assert "--" not in slug
        assert not slug.startswith("-")

    @given(st.text())
    def test_resanitizing_only_trims_a_cut_dash(self, text):
        slug = sanitize(text)
        assert sanitize(slug) == slug.strip("-")

    @given(st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=1, max_size=50))
    def test_slugs_are_fixed_points(self, text):
        assert sanitize(text) == text

    @given(st.text())
    def test_case_insensitive(self, text):
        assume(text.isascii())
        assert sanitize(text.upper()) == sanitize(text.lower())


# =============================================================================
# derive_identifier
# =============================================================================


class TestDeriveIdentifierProperties:
    """Property tests for derive_identifier."""

    @given(source_items())
    def test_deterministic(self, item):
        assert derive_identifier(item) == derive_identifier(item)

    @given(source_items())
    def test_never_empty(self, item):
        assert derive_identifier(item)

    @given(source_items())
    def test_description_rule(self, item):
        assume(item.description and sanitize(item.description))
        assert derive_identifier(item) == sanitize(item.description)

    @given(gist_ids, st.sampled_from([None, "", "!!!"]))
    def test_id_fallback(self, gist_id, description):
        item = SourceItem(id=gist_id, description=description)
        assert derive_identifier(item) == gist_id[:8]

    @given(source_items(), st.text(max_size=80))
    def test_files_do_not_matter_when_description_wins(self, item, description):
        assume(sanitize(description))
        a = SourceItem(id=item.id, description=description, files=item.files)
        b = SourceItem(id=item.id, description=description)
        assert derive_identifier(a) == derive_identifier(b)


# =============================================================================
# apply_filters
# =============================================================================


class TestApplyFiltersProperties:
    """Property tests for the filter chain."""

    @given(
        st.lists(source_items(), max_size=12),
        st.sampled_from(list(VisibilityFilter)),
        st.sampled_from([None, "2024-01-01"]),
    )
    def test_result_is_ordered_subsequence(self, items, visibility, since):
        result = apply_filters(items, SourceFilters(visibility=visibility, since=since))

        positions = [next(i for i, x in enumerate(items) if x is r) for r in result]
        assert positions == sorted(positions)

    @given(st.lists(source_items(), max_size=12))
    def test_no_filters_is_identity(self, items):
        assert apply_filters(items, SourceFilters()) == items

    @given(st.lists(source_items(), max_size=12), st.data())
    def test_id_allow_list_ignores_other_filters(self, items, data):
        assume(items)
        chosen = data.draw(st.sampled_from(items))
        filters = SourceFilters(
            gist_ids=[chosen.id],
            visibility=VisibilityFilter.PRIVATE if chosen.is_public else VisibilityFilter.PUBLIC,
            exclude_patterns=[".*"],
        )

        result = apply_filters(items, filters)

        assert chosen in result
        assert all(r.id == chosen.id for r in result)
