"""Tests for display numbering derived from hierarchy position."""

from __future__ import annotations

import pytest

from constitution.domain.hierarchy import find_orphans, sort_by_order
from constitution.domain.invariants.exceptions import StructuralIntegrityError
from constitution.domain.numbering import (
    display_title,
    indent_level,
    numbering_cache,
    rank_in_group,
    subsection_number,
    to_roman_numeral,
)


@pytest.fixture()
def document(make_section):
    """Two articles, a section, and two levels of subsections."""
    return [
        make_section("p", "preamble", order=0, title="We the members"),
        make_section("a1", "article", order=1, title="Name"),
        make_section("a2", "article", order=2, title="Purpose"),
        make_section("s1", "section", order=1, parent_id="a1", title="Official Name"),
        make_section("ss1", "subsection", order=1, parent_id="s1", title="Abbreviation"),
        make_section("ss2", "subsection", order=1, parent_id="ss1", title="Usage"),
        make_section("m1", "amendment", order=3, title="First Change"),
    ]


def _by_id(sections, section_id):
    return next(s for s in sections if s.id == section_id)


class TestRomanNumerals:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1, "I"),
            (4, "IV"),
            (9, "IX"),
            (14, "XIV"),
            (40, "XL"),
            (90, "XC"),
            (400, "CD"),
            (1994, "MCMXCIV"),
            (3999, "MMMCMXCIX"),
        ],
    )
    def test_known_values(self, value: int, expected: str) -> None:
        """Subtractive pairs are used for 4, 9, 40, 90, 400 and 900."""
        assert to_roman_numeral(value) == expected

    @pytest.mark.parametrize("value", [0, -3, 2.5, "4"])
    def test_rejects_non_positive_or_non_integer(self, value) -> None:
        """Only positive integers have a numeral."""
        with pytest.raises(ValueError):
            to_roman_numeral(value)


class TestDisplayTitle:
    def test_end_to_end_scenario(self, document) -> None:
        """Articles, sections and nested subsections get positional labels."""
        assert display_title(_by_id(document, "a1"), document) == "Article I - Name"
        assert display_title(_by_id(document, "a2"), document) == "Article II - Purpose"
        assert display_title(_by_id(document, "s1"), document) == "Section 1 - Official Name"
        assert display_title(_by_id(document, "ss1"), document) == "Subsection 1.1 - Abbreviation"
        assert display_title(_by_id(document, "ss2"), document) == "Subsection 1.1A - Usage"

    def test_preamble_ignores_title(self, document) -> None:
        """The preamble is always just "Preamble"."""
        assert display_title(_by_id(document, "p"), document) == "Preamble"

    def test_amendment_numbered_in_arabic(self, document, make_section) -> None:
        """Amendments are counted among amendments only."""
        document.append(make_section("m2", "amendment", order=9, title=""))

        assert display_title(_by_id(document, "m1"), document) == "Amendment 1 - First Change"
        assert display_title(_by_id(document, "m2"), document) == "Amendment 2"

    def test_empty_title_omits_suffix(self, make_section) -> None:
        """No trailing " - " when the title is empty."""
        article = make_section("a", "article", title="")
        assert display_title(article, [article]) == "Article I"

    def test_section_numbers_restart_per_article(self, document, make_section) -> None:
        """Sections are ranked within their own article."""
        document.append(make_section("s2", "section", order=1, parent_id="a2", title="Goals"))
        document.append(make_section("s3", "section", order=2, parent_id="a1", title="Seal"))

        assert display_title(_by_id(document, "s2"), document) == "Section 1 - Goals"
        assert display_title(_by_id(document, "s3"), document) == "Section 2 - Seal"

    def test_rank_follows_order_not_cached_number(self, make_section) -> None:
        """A stale cached article_number is never used for the label."""
        first = make_section("x", "article", order=5, title="X", article_number=7)
        second = make_section("y", "article", order=10, title="Y", article_number=1)

        assert display_title(first, [second, first]) == "Article I - X"
        assert display_title(second, [second, first]) == "Article II - Y"

    def test_section_absent_from_list_is_included(self, document, make_section) -> None:
        """A section not yet in the list is ranked as if it were."""
        draft = make_section("a3", "article", order=4, title="Draft")
        assert display_title(draft, document) == "Article III - Draft"

    def test_orphaned_subsection_degrades(self, make_section) -> None:
        """An unresolved ancestor yields an un-numbered label instead of an error."""
        orphan = make_section("ss", "subsection", parent_id="deleted", title="Leftover")
        assert display_title(orphan, [orphan]) == "Subsection - Leftover"

    def test_unknown_type_falls_back_to_title(self, make_section) -> None:
        """Unknown types show their title, or a placeholder."""
        assert display_title(make_section("z", "appendix", title="Bylaws"), []) == "Bylaws"
        assert display_title(make_section("z", "appendix"), []) == "Untitled Section"


class TestSubsectionNumber:
    def test_letters_run_through_the_alphabet(self, make_section) -> None:
        """Second-level subsections are lettered A..Z, then fall back to the rank."""
        sections = [
            make_section("a", "article"),
            make_section("s", "section", parent_id="a"),
            make_section("ss", "subsection", parent_id="s"),
        ]
        for i in range(1, 28):
            sections.append(make_section(f"n{i}", "subsection", order=i, parent_id="ss"))

        assert subsection_number(_by_id(sections, "n1"), sections) == "1.1A"
        assert subsection_number(_by_id(sections, "n26"), sections) == "1.1Z"
        assert subsection_number(_by_id(sections, "n27"), sections) == "1.127"

    def test_second_section_and_subsection(self, make_section) -> None:
        """Both the section rank and subsection rank feed the number."""
        sections = [
            make_section("a", "article"),
            make_section("s1", "section", order=1, parent_id="a"),
            make_section("s2", "section", order=2, parent_id="a"),
            make_section("x", "subsection", order=1, parent_id="s2"),
            make_section("y", "subsection", order=2, parent_id="s2"),
            make_section("z", "subsection", order=1, parent_id="y"),
            make_section("w", "subsection", order=2, parent_id="y"),
        ]

        assert subsection_number(_by_id(sections, "y"), sections) == "2.2"
        assert subsection_number(_by_id(sections, "w"), sections) == "2.2B"

    def test_cycle_raises_structural_error(self, make_section) -> None:
        """A parent loop is reported, never walked forever."""
        sections = [
            make_section("x", "subsection", parent_id="y"),
            make_section("y", "subsection", parent_id="x"),
        ]

        with pytest.raises(StructuralIntegrityError) as excinfo:
            subsection_number(sections[0], sections)
        assert "x" in excinfo.value.section_ids


class TestRanking:
    def test_ranks_are_gapless(self, make_section) -> None:
        """Ranks within a group are 1..N even when order values have gaps."""
        group = sort_by_order([
            make_section("c", "article", order=30.5),
            make_section("a", "article", order=-2),
            make_section("b", "article", order=7),
        ])

        assert [rank_in_group(s, group) for s in group] == [1, 2, 3]
        assert [s.id for s in group] == ["a", "b", "c"]

    def test_ties_keep_input_order(self, make_section) -> None:
        """Equal order values do not reshuffle members."""
        group = sort_by_order([
            make_section("first", "article", order=1),
            make_section("second", "article", order=1),
        ])
        assert [s.id for s in group] == ["first", "second"]

    def test_missing_member_raises(self, make_section) -> None:
        """Ranking a section outside the group is an error."""
        with pytest.raises(ValueError):
            rank_in_group(make_section("x", "article"), [])


class TestIndentAndCache:
    def test_indent_levels(self, document) -> None:
        """Top level 0, section 1, subsections 2 plus their depth."""
        levels = {s.id: indent_level(s, document) for s in document}
        assert levels == {"p": 0, "a1": 0, "a2": 0, "s1": 1, "ss1": 2, "ss2": 3, "m1": 0}

    def test_numbering_cache(self, document) -> None:
        """The cache mirrors the derived numbers for each section."""
        cache = numbering_cache(document)

        assert cache["a1"] == {"article_number": 1}
        assert cache["a2"] == {"article_number": 2}
        assert cache["m1"] == {"amendment_number": 1}
        assert cache["s1"] == {"section_number": 1}
        assert cache["ss2"] == {"subsection_letter": "1.1A"}
        assert "p" not in cache

    def test_find_orphans(self, document, make_section) -> None:
        """Sections pointing at a missing parent are reported."""
        orphan = make_section("o", "section", parent_id="gone")
        assert [s.id for s in find_orphans([*document, orphan])] == ["o"]
