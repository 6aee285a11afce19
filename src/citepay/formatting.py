"""Citation formatting utilities.

Each supported style is described by a ``StyleTemplate``: how the author list
is rendered, and the layout used with and without authors. Formatting is pure;
the same work, author list and style always produce the same string.
"""
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Union

from .config import Config
from .errors import UnknownStyleError
from .models import Author, CitationStyle, Work
from .name_utils import initials, parse_personal_name

APA_MAX_AUTHORS = 20
CHICAGO_MAX_AUTHORS = 10
CHICAGO_TRUNCATED_AUTHORS = 7
HARVARD_MAX_AUTHORS = 3


def _surname_initials(author: Author) -> str:
    """'Dr. Sarah Chen' -> 'Chen, S.'"""
    name = parse_personal_name(author.name)
    given = initials(name.given)
    return f"{name.family}, {given}" if given else name.family


def _surname_given(author: Author) -> str:
    """'Dr. Sarah Chen' -> 'Chen, Sarah'"""
    name = parse_personal_name(author.name)
    return f"{name.family}, {name.given}" if name.given else name.family


def _given_surname(author: Author) -> str:
    """'Dr. Sarah Chen' -> 'Sarah Chen'"""
    name = parse_personal_name(author.name)
    return f"{name.given} {name.family}".strip()


def _family(author: Author) -> str:
    return parse_personal_name(author.name).family


def _sentence(text: str) -> str:
    """Terminate text with a period unless it already ends a sentence."""
    text = text.strip()
    if not text or text[-1] in ".?!":
        return text
    return text + "."


def format_apa_authors(authors: Sequence[Author]) -> str:
    # "Chen, S., & Rodriguez, M." / "Chen, S., Rodriguez, M., & Petrov, E."
    names = [_surname_initials(a) for a in authors]
    if len(names) > APA_MAX_AUTHORS:
        return ", ".join(names[:APA_MAX_AUTHORS - 1]) + ", . . . " + names[-1]
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + ", & " + names[-1]


def format_mla_authors(authors: Sequence[Author]) -> str:
    # "Chen, Sarah" / "Chen, Sarah, and Michael Rodriguez" / "Chen, Sarah, et al."
    first = _surname_given(authors[0])
    if len(authors) == 1:
        return first
    if len(authors) == 2:
        return f"{first}, and {_given_surname(authors[1])}"
    return f"{first}, et al."


def format_chicago_authors(authors: Sequence[Author]) -> str:
    # "Chen, Sarah, Michael Rodriguez, and Elena Petrov"
    names = [_surname_given(authors[0])] + [_given_surname(a) for a in authors[1:]]
    if len(names) > CHICAGO_MAX_AUTHORS:
        return ", ".join(names[:CHICAGO_TRUNCATED_AUTHORS]) + ", et al."
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + ", and " + names[-1]


def format_harvard_authors(authors: Sequence[Author]) -> str:
    # "Chen, S., Rodriguez, M. and Petrov, E." / "Chen, S. et al."
    names = [_surname_initials(a) for a in authors]
    if len(names) > HARVARD_MAX_AUTHORS:
        return f"{names[0]} et al."
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " and " + names[-1]


def _in_text_author_date(families: List[str], year: str, conjunction: str) -> str:
    if len(families) > 2:
        return f"({families[0]} et al., {year})"
    return f"({f' {conjunction} '.join(families)}, {year})"


def _in_text_apa(families: List[str], year: str) -> str:
    return _in_text_author_date(families, year, "&")


def _in_text_harvard(families: List[str], year: str) -> str:
    return _in_text_author_date(families, year, "and")


def _in_text_mla(families: List[str], year: str) -> str:
    if len(families) > 2:
        return f"({families[0]} et al.)"
    return f"({' and '.join(families)})"


def _in_text_chicago(families: List[str], year: str) -> str:
    if len(families) > 3:
        return f"({families[0]} et al. {year})"
    if len(families) == 3:
        return f"({families[0]}, {families[1]}, and {families[2]} {year})"
    return f"({' and '.join(families)} {year})"


@dataclass(frozen=True)
class StyleTemplate:
    """Rendering rules for one citation style.

    Layout placeholders: ``{authors}``, ``{authors_sentence}``, ``{year}``,
    ``{title}``, ``{title_sentence}``, ``{venue}``.
    """
    authors: Callable[[Sequence[Author]], str]
    layout: str
    layout_without_authors: str
    in_text: Callable[[List[str], str], str]


STYLE_TEMPLATES: Dict[CitationStyle, StyleTemplate] = {
    CitationStyle.APA: StyleTemplate(
        authors=format_apa_authors,
        layout="{authors} ({year}). {title_sentence} {venue}.",
        layout_without_authors="{title_sentence} ({year}).",
        in_text=_in_text_apa,
    ),
    CitationStyle.MLA: StyleTemplate(
        authors=format_mla_authors,
        layout='{authors_sentence} "{title_sentence}" {venue}, {year}.',
        layout_without_authors='"{title_sentence}" {year}.',
        in_text=_in_text_mla,
    ),
    CitationStyle.CHICAGO: StyleTemplate(
        authors=format_chicago_authors,
        layout='{authors_sentence} "{title_sentence}" {venue} ({year}).',
        layout_without_authors='"{title_sentence}" ({year}).',
        in_text=_in_text_chicago,
    ),
    CitationStyle.HARVARD: StyleTemplate(
        authors=format_harvard_authors,
        layout="{authors} ({year}) '{title}', {venue}.",
        layout_without_authors="{title} ({year}).",
        in_text=_in_text_harvard,
    ),
}


class CitationFormatter:
    """Format citations for a work in the supported styles."""

    def __init__(
        self,
        venue_template: Optional[str] = None,
        default_venue: Optional[str] = None,
        templates: Optional[Dict[CitationStyle, StyleTemplate]] = None,
    ):
        self.venue_template = venue_template if venue_template is not None else Config.VENUE_TEMPLATE
        self.default_venue = default_venue if default_venue is not None else Config.DEFAULT_VENUE
        self.templates = templates if templates is not None else STYLE_TEMPLATES

    @property
    def styles(self) -> List[CitationStyle]:
        return [s for s in CitationStyle if s in self.templates]

    def _template(self, style: Union[CitationStyle, str]) -> StyleTemplate:
        resolved = CitationStyle.parse(style)
        template = self.templates.get(resolved)
        if template is None:
            raise UnknownStyleError(style)
        return template

    def venue(self, work: Work) -> str:
        if not work.field:
            return self.default_venue
        return self.venue_template.format(field=work.field)

    def format(self, work: Work, authors: Sequence[Author], style: Union[CitationStyle, str]) -> str:
        """Render the full citation for ``work`` credited to ``authors``."""
        template = self._template(style)
        year = str(work.year) if work.year else "n.d."
        values = {
            "year": year,
            "title": work.title.strip(),
            "title_sentence": _sentence(work.title),
            "venue": self.venue(work),
        }
        if not authors:
            return template.layout_without_authors.format(**values)

        author_str = template.authors(authors)
        return template.layout.format(
            authors=author_str,
            authors_sentence=_sentence(author_str),
            **values,
        )

    def format_all(self, work: Work) -> Dict[CitationStyle, str]:
        """Citations for every supported style, in declaration order."""
        return {style: self.format(work, work.authors, style) for style in self.styles}

    def in_text_citation(self, work: Work, style: Union[CitationStyle, str]) -> str:
        """Parenthetical in-text citation."""
        template = self._template(style)
        year = str(work.year) if work.year else "n.d."
        families = [_family(a) for a in work.authors if _family(a)]
        if not families:
            families = [work.title.strip() or "Untitled"]
        return template.in_text(families, year)


default_formatter = CitationFormatter()


def format_citation(work: Work, authors: Sequence[Author], style: Union[CitationStyle, str]) -> str:
    """Format a citation with the default formatter."""
    return default_formatter.format(work, authors, style)


def format_all(work: Work) -> Dict[CitationStyle, str]:
    return default_formatter.format_all(work)


def in_text_citation(work: Work, style: Union[CitationStyle, str]) -> str:
    return default_formatter.in_text_citation(work, style)
