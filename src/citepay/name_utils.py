"""
Name parsing utilities for rendering author lists.
"""
from typing import List, NamedTuple

# common particles in multi-word surnames
NAME_PARTICLES = {
    "van", "von", "der", "den", "ter", "ten",
    "de", "del", "della", "di", "da", "dos", "du",
    "la", "le", "lo", "las", "los"
}

HONORIFICS = {"dr", "prof", "professor", "mr", "mrs", "ms", "mx", "miss", "sir", "dame"}

SUFFIXES = {"jr", "sr", "ii", "iii", "iv", "phd", "md", "msc", "bsc", "frs"}


class PersonalName(NamedTuple):
    given: str
    family: str


def _bare(token: str) -> str:
    return token.strip().strip(".,").lower()


def looks_like_initial(token: str) -> bool:
    t = token.strip().replace(".", "")
    return len(t) == 1 and t.isalpha()


def strip_titles(parts: List[str]) -> List[str]:
    """Drop leading honorifics ("Dr.", "Prof.") and trailing suffixes ("PhD", "Jr.")."""
    start, end = 0, len(parts)
    while start < end and _bare(parts[start]) in HONORIFICS:
        start += 1
    while end > start and _bare(parts[end - 1]) in SUFFIXES:
        end -= 1
    return parts[start:end]


def parse_personal_name(name: str) -> PersonalName:
    """
    Split a display name into given and family parts.

    Examples:
        "Dr. Sarah Chen"        -> ("Sarah", "Chen")
        "Chen, Sarah"           -> ("Sarah", "Chen")
        "Juan Carlos de la Cruz" -> ("Juan Carlos", "de la Cruz")
        "de la Cruz J"          -> ("J", "de la Cruz")
        "Plato"                 -> ("", "Plato")
    """
    text = " ".join((name or "").split())
    if not text:
        return PersonalName("", "")

    # "Surname, Given" layout; a trailing ", PhD" is a suffix, not a given name
    if "," in text:
        chunks = [c.strip() for c in text.split(",") if c.strip()]
        chunks = [c for c in chunks if _bare(c) not in SUFFIXES]
        if len(chunks) >= 2:
            family = " ".join(strip_titles(chunks[0].split())) or chunks[0]
            given = " ".join(strip_titles(chunks[1].split()))
            return PersonalName(given, family)
        text = chunks[0] if chunks else ""

    parts = strip_titles(text.split())
    n = len(parts)

    if n == 0:
        return PersonalName("", "")

    if n == 1:
        # mononym
        return PersonalName("", parts[0])

    if n == 2:
        a, b = parts
        if looks_like_initial(b) and not looks_like_initial(a):
            return PersonalName(b, a)   # "Chen S"
        return PersonalName(a, b)       # "Sarah Chen" or "S Chen"

    # n >= 3
    # layout (B): "de la Cruz J" -> given="J", family="de la Cruz"
    if looks_like_initial(parts[-1]):
        return PersonalName(parts[-1], " ".join(parts[:-1]))

    # layout (A): "Juan Carlos de la Cruz"
    i = n - 2
    while i > 0 and (parts[i].lower() in NAME_PARTICLES or parts[i].islower()):
        i -= 1
    return PersonalName(" ".join(parts[:i + 1]), " ".join(parts[i + 1:]))


def initials(given: str) -> str:
    """
    Abbreviate given names to initials.

    "Sarah" -> "S.", "Sarah Jane" -> "S. J.", "Jean-Paul" -> "J.-P."
    """
    out = []
    for word in given.replace(".", ". ").split():
        pieces = [p.strip(".") for p in word.split("-") if p.strip(".")]
        if pieces:
            out.append("-".join(p[0].upper() + "." for p in pieces))
    return " ".join(out)
