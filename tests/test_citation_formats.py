"""Tests for citation formatting functions."""
from dataclasses import replace
from datetime import date

import pytest

from citepay.errors import UnknownStyleError
from citepay.formatting import (
    CitationFormatter,
    format_apa_authors,
    format_chicago_authors,
    format_citation,
    format_harvard_authors,
    format_mla_authors,
)
from citepay.models import Author, CitationStyle

TITLE = (
    "CRISPR-Cas9 Enhanced Metabolic Engineering for Sustainable Biofuel "
    "Production in Engineered Microorganisms"
)
VENUE = "DeSci Journal of Synthetic Biology"

EXPECTED = {
    CitationStyle.APA: f"Chen, S., Rodriguez, M., & Petrov, E. (2024). {TITLE}. {VENUE}.",
    CitationStyle.MLA: f'Chen, Sarah, et al. "{TITLE}." {VENUE}, 2024.',
    CitationStyle.CHICAGO: f'Chen, Sarah, Michael Rodriguez, and Elena Petrov. "{TITLE}." {VENUE} (2024).',
    CitationStyle.HARVARD: f"Chen, S., Rodriguez, M. and Petrov, E. (2024) '{TITLE}', {VENUE}.",
}


def make_authors(count):
    return [Author(name=f"Given{i} Family{i}") for i in range(1, count + 1)]


@pytest.fixture
def formatter():
    return CitationFormatter(venue_template="DeSci Journal of {field}", default_venue="DeSci Journal")


class TestAuthorFormatting:
    """Tests for author list rendering."""

    def test_apa_authors_single(self, sample_authors):
        assert format_apa_authors(sample_authors[:1]) == "Chen, S."

    def test_apa_authors_two(self, sample_authors):
        assert format_apa_authors(sample_authors[:2]) == "Chen, S., & Rodriguez, M."

    def test_apa_authors_over_twenty_truncated(self):
        """APA lists 19 authors, an ellipsis, then the final author."""
        expected = ", ".join(f"Family{i}, G." for i in range(1, 20)) + ", . . . Family25, G."
        assert format_apa_authors(make_authors(25)) == expected

    def test_apa_authors_twenty_listed_in_full(self):
        result = format_apa_authors(make_authors(20))
        assert ". . ." not in result
        assert result.endswith(", & Family20, G.")

    def test_mla_authors_single(self, sample_authors):
        assert format_mla_authors(sample_authors[:1]) == "Chen, Sarah"

    def test_mla_authors_two(self, sample_authors):
        assert format_mla_authors(sample_authors[:2]) == "Chen, Sarah, and Michael Rodriguez"

    def test_mla_authors_three_uses_et_al(self, sample_authors):
        assert format_mla_authors(sample_authors) == "Chen, Sarah, et al."

    def test_chicago_authors_two(self, sample_authors):
        assert format_chicago_authors(sample_authors[:2]) == "Chen, Sarah, and Michael Rodriguez"

    def test_chicago_authors_over_ten_truncated(self):
        """Chicago lists the first seven of eleven or more authors."""
        names = ["Family1, Given1"] + [f"Given{i} Family{i}" for i in range(2, 8)]
        assert format_chicago_authors(make_authors(11)) == ", ".join(names) + ", et al."

    def test_chicago_authors_ten_listed_in_full(self):
        result = format_chicago_authors(make_authors(10))
        assert "et al." not in result
        assert result.endswith(", and Given10 Family10")

    def test_harvard_authors_two(self, sample_authors):
        assert format_harvard_authors(sample_authors[:2]) == "Chen, S. and Rodriguez, M."

    def test_harvard_authors_four_uses_et_al(self):
        assert format_harvard_authors(make_authors(4)) == "Family1, G. et al."


class TestFormatCitation:
    """Tests for full citation strings."""

    @pytest.mark.parametrize("style", list(CitationStyle))
    def test_three_author_citation(self, formatter, sample_work, style):
        assert formatter.format(sample_work, sample_work.authors, style) == EXPECTED[style]

    @pytest.mark.parametrize("style", list(CitationStyle))
    def test_deterministic(self, formatter, sample_work, style):
        first = formatter.format(sample_work, sample_work.authors, style)
        second = formatter.format(sample_work, sample_work.authors, style)
        assert first == second

    def test_verified_flag_does_not_change_text(self, formatter, sample_work):
        """Unverified authors are still credited in the citation."""
        unverified = tuple(replace(a, verified=False) for a in sample_work.authors)
        work = replace(sample_work, authors=unverified)
        for style in CitationStyle:
            assert formatter.format(work, work.authors, style) == EXPECTED[style]

    def test_empty_author_list(self, formatter, sample_work):
        """Without authors only the title and date are rendered."""
        assert formatter.format(sample_work, [], CitationStyle.APA) == f"{TITLE}. (2024)."
        assert formatter.format(sample_work, [], CitationStyle.MLA) == f'"{TITLE}." 2024.'
        assert formatter.format(sample_work, [], CitationStyle.CHICAGO) == f'"{TITLE}." (2024).'
        assert formatter.format(sample_work, [], CitationStyle.HARVARD) == f"{TITLE} (2024)."

    def test_missing_date_renders_nd(self, formatter, sample_work):
        work = replace(sample_work, publication_date=None)
        assert "(n.d.)" in formatter.format(work, work.authors, CitationStyle.APA)

    def test_missing_field_uses_default_venue(self, formatter, sample_work):
        work = replace(sample_work, field="")
        result = formatter.format(work, work.authors, CitationStyle.APA)
        assert result.endswith(f"{TITLE}. DeSci Journal.")

    def test_title_with_question_mark(self, formatter, sample_work):
        work = replace(sample_work, title="Is CRISPR Enough?")
        result = formatter.format(work, work.authors, CitationStyle.MLA)
        assert '"Is CRISPR Enough?" ' in result

    def test_style_given_as_string(self, formatter, sample_work):
        assert formatter.format(sample_work, sample_work.authors, "chicago") == EXPECTED[CitationStyle.CHICAGO]

    def test_unknown_style(self, formatter, sample_work):
        with pytest.raises(UnknownStyleError):
            formatter.format(sample_work, sample_work.authors, "IEEE")

    def test_style_missing_from_templates(self, sample_work):
        limited = CitationFormatter(templates={})
        with pytest.raises(UnknownStyleError):
            limited.format(sample_work, sample_work.authors, CitationStyle.APA)

    def test_module_function_matches_default_formatter(self, sample_work):
        direct = CitationFormatter().format(sample_work, sample_work.authors, CitationStyle.HARVARD)
        assert format_citation(sample_work, sample_work.authors, CitationStyle.HARVARD) == direct

    def test_format_all(self, formatter, sample_work):
        citations = formatter.format_all(sample_work)
        assert list(citations) == list(CitationStyle)
        assert citations == EXPECTED

    def test_honorifics_and_particles(self, formatter, sample_work):
        authors = [Author(name="Prof. Juan Carlos de la Cruz"), Author(name="Ludwig van Beethoven, PhD")]
        result = formatter.format(sample_work, authors, CitationStyle.APA)
        assert result.startswith("de la Cruz, J. C., & van Beethoven, L. (2024).")


class TestInTextCitation:
    """Tests for in-text citation formatting."""

    def test_apa_three_authors(self, formatter, sample_work):
        assert formatter.in_text_citation(sample_work, CitationStyle.APA) == "(Chen et al., 2024)"

    def test_apa_two_authors(self, formatter, sample_work):
        work = replace(sample_work, authors=sample_work.authors[:2])
        assert formatter.in_text_citation(work, CitationStyle.APA) == "(Chen & Rodriguez, 2024)"

    def test_harvard_single_author(self, formatter, sample_work):
        work = replace(sample_work, authors=sample_work.authors[:1])
        assert formatter.in_text_citation(work, CitationStyle.HARVARD) == "(Chen, 2024)"

    def test_mla(self, formatter, sample_work):
        assert formatter.in_text_citation(sample_work, CitationStyle.MLA) == "(Chen et al.)"

    def test_chicago_three_authors(self, formatter, sample_work):
        assert formatter.in_text_citation(sample_work, CitationStyle.CHICAGO) == "(Chen, Rodriguez, and Petrov 2024)"

    def test_no_authors_uses_title(self, formatter):
        from citepay.models import Work
        work = Work(identifier="w1", title="Anonymous Notes", publication_date=date(2020, 1, 1))
        assert formatter.in_text_citation(work, CitationStyle.APA) == "(Anonymous Notes, 2020)"
