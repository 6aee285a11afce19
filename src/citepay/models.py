"""Data models for the citation payment workflow."""
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .errors import UnknownStyleError


class CitationStyle(Enum):
    """Supported citation styles."""
    APA = "APA"
    MLA = "MLA"
    CHICAGO = "Chicago"
    HARVARD = "Harvard"

    @classmethod
    def parse(cls, value: Union["CitationStyle", str]) -> "CitationStyle":
        """Resolve a style from a member or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for style in cls:
                if key in (style.value.lower(), style.name.lower()):
                    return style
        raise UnknownStyleError(value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Author:
    """Author of a work and the destination for attributed payments."""
    name: str
    payment_address: str = ""
    verified: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Author":
        d = {k.lower(): v for k, v in data.items()}
        return cls(
            name=str(d.get("name", "")).strip(),
            payment_address=str(d.get("payment_address") or d.get("wallet") or ""),
            verified=bool(d.get("verified", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "payment_address": self.payment_address,
            "verified": self.verified,
        }


def _to_decimal(value: Any, default: str = "0") -> Decimal:
    if value is None or value == "":
        return Decimal(default)
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Not a decimal value: {value!r}")


def _to_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if len(text) == 4 and text.isdigit():
        return date(int(text), 1, 1)
    return date.fromisoformat(text[:10])


@dataclass(frozen=True)
class Work:
    """A scholarly work that can be cited and paid for.

    Created by a work repository and never mutated by the workflow.
    """
    identifier: str
    title: str
    authors: Tuple[Author, ...] = ()
    field: str = ""
    publication_date: Optional[date] = None
    base_fee: Decimal = Decimal("0")

    # Descriptive metadata carried through for consumers
    abstract: Optional[str] = None
    keywords: Tuple[str, ...] = ()
    license: Optional[str] = None
    content_hash: Optional[str] = None
    token_uri: Optional[str] = None
    citation_count: int = 0
    total_earned: Decimal = Decimal("0")

    def __post_init__(self):
        # Accept lists and plain numbers from callers
        object.__setattr__(self, "authors", tuple(self.authors))
        object.__setattr__(self, "keywords", tuple(self.keywords))
        object.__setattr__(self, "base_fee", _to_decimal(self.base_fee))
        object.__setattr__(self, "total_earned", _to_decimal(self.total_earned))
        if not self.base_fee.is_finite() or self.base_fee < 0:
            raise ValueError(f"Base citation fee must not be negative: {self.base_fee}")

    @property
    def year(self) -> Optional[int]:
        return self.publication_date.year if self.publication_date else None

    @property
    def payees(self) -> Tuple[Author, ...]:
        """Verified authors, the only ones eligible for payout attribution."""
        return tuple(a for a in self.authors if a.verified)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Work":
        """Create a Work from repository JSON.

        Accepts both snake_case keys and the camelCase keys used by the
        paper detail page (``publishDate``, ``citationReward``, ``ipfsHash``).
        """
        d = {k.lower(): v for k, v in data.items()}

        identifier = d.get("identifier") or d.get("id")
        if not identifier:
            raise ValueError("Work is missing an identifier")

        authors = []
        for a in d.get("authors") or []:
            if isinstance(a, Author):
                authors.append(a)
            elif isinstance(a, dict):
                authors.append(Author.from_dict(a))
            else:
                authors.append(Author(name=str(a)))
        keywords = d.get("keywords") or []
        if isinstance(keywords, str):
            keywords = [k.strip() for k in keywords.split(",") if k.strip()]

        return cls(
            identifier=str(identifier),
            title=str(d.get("title", "")).strip(),
            authors=authors,
            field=str(d.get("field", "") or ""),
            publication_date=_to_date(d.get("publication_date") or d.get("publishdate")),
            base_fee=_to_decimal(d.get("base_fee", d.get("citationreward"))),
            abstract=d.get("abstract"),
            keywords=tuple(keywords),
            license=d.get("license"),
            content_hash=d.get("content_hash") or d.get("ipfshash"),
            token_uri=d.get("token_uri") or d.get("tokenuri"),
            citation_count=int(d.get("citation_count", d.get("citations", 0)) or 0),
            total_earned=_to_decimal(d.get("total_earned", d.get("totalearned"))),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary for JSON serialization."""
        data = {
            "identifier": self.identifier,
            "title": self.title,
            "authors": [a.to_dict() for a in self.authors],
            "field": self.field,
            "publication_date": self.publication_date.isoformat() if self.publication_date else None,
            "base_fee": str(self.base_fee),
            "abstract": self.abstract,
            "keywords": list(self.keywords),
            "license": self.license,
            "content_hash": self.content_hash,
            "token_uri": self.token_uri,
            "citation_count": self.citation_count,
            "total_earned": str(self.total_earned),
        }
        # Remove None values
        return {k: v for k, v in data.items() if v is not None}


@dataclass
class CitationRequest:
    """In-progress citation selections, edited while the flow is open."""
    amount_input: str
    amount: Optional[Decimal]
    style: CitationStyle
    purpose: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount_input": self.amount_input,
            "amount": str(self.amount) if self.amount is not None else None,
            "style": self.style.value,
            "purpose": self.purpose,
        }


@dataclass(frozen=True)
class FeeQuote:
    """Fee breakdown for one amount."""
    amount: Decimal
    network_fee: Decimal
    total: Decimal
    display_total: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {
            "amount": str(self.amount),
            "network_fee": str(self.network_fee),
            "total": str(self.total),
            "display_total": str(self.display_total),
        }


@dataclass(frozen=True)
class PaymentAttempt:
    """One submitted citation payment. Built once and never reused."""
    attempt_id: str
    work_id: str
    amount: Decimal
    network_fee: Decimal
    total: Decimal
    payees: Tuple[Author, ...]
    style: CitationStyle
    purpose: str
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attempt_id": self.attempt_id,
            "work_id": self.work_id,
            "amount": str(self.amount),
            "network_fee": str(self.network_fee),
            "total": str(self.total),
            "payees": [a.to_dict() for a in self.payees],
            "style": self.style.value,
            "purpose": self.purpose,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class PaymentSuccess:
    """Payment service accepted the attempt."""
    receipt_id: str


@dataclass(frozen=True)
class PaymentFailure:
    """Payment service did not complete the attempt."""
    reason: str


PaymentOutcome = Union[PaymentSuccess, PaymentFailure]


@dataclass(frozen=True)
class Receipt:
    """What the reader gets back after a successful payment."""
    attempt: PaymentAttempt
    receipt_id: str
    citation: str

    @property
    def style(self) -> CitationStyle:
        return self.attempt.style

    def to_dict(self) -> Dict[str, Any]:
        return {
            "receipt_id": self.receipt_id,
            "citation": self.citation,
            "attempt": self.attempt.to_dict(),
        }
