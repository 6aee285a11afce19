"""Pytest configuration and fixtures."""
import asyncio
import sys
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import List, Optional

import pytest

# Add the source tree to the Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from citepay.models import Author, PaymentAttempt, PaymentSuccess, Work  # noqa: E402
from citepay.payments import PaymentService  # noqa: E402

SAMPLE_TITLE = (
    "CRISPR-Cas9 Enhanced Metabolic Engineering for Sustainable Biofuel "
    "Production in Engineered Microorganisms"
)

FIXED_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class RecordingPaymentService(PaymentService):
    """Payment service double that records attempts.

    Call ``arm()`` inside the running event loop to hold each submission
    until ``release`` is set.
    """

    def __init__(self, outcome=None):
        self.outcome = outcome if outcome is not None else PaymentSuccess("rcpt-001")
        self.attempts: List[PaymentAttempt] = []
        self.started: Optional[asyncio.Event] = None
        self.release: Optional[asyncio.Event] = None

    def arm(self) -> None:
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def submit(self, attempt):
        self.attempts.append(attempt)
        if self.started is not None:
            self.started.set()
            await self.release.wait()
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome


@pytest.fixture
def sample_authors() -> List[Author]:
    """Three authors, the last one unverified."""
    return [
        Author(name="Dr. Sarah Chen", payment_address="0xabcd...1234", verified=True),
        Author(name="Dr. Michael Rodriguez", payment_address="0xefgh...5678", verified=True),
        Author(name="Dr. Elena Petrov", payment_address="0xijkl...9012", verified=False),
    ]


@pytest.fixture
def sample_work(sample_authors) -> Work:
    """Return the sample paper used throughout the tests."""
    return Work(
        identifier="0x1234...5678",
        title=SAMPLE_TITLE,
        authors=tuple(sample_authors),
        field="Synthetic Biology",
        publication_date=date(2024, 3, 15),
        base_fee=Decimal("5"),
        keywords=("CRISPR-Cas9", "Biofuel"),
        license="Creative Commons Attribution 4.0",
    )


@pytest.fixture
def other_work() -> Work:
    return Work(
        identifier="0xfeed",
        title="A Second Paper",
        authors=(Author(name="Ada Lovelace", payment_address="0x01", verified=True),),
        field="Mathematics",
        publication_date=date(2023, 1, 1),
        base_fee=Decimal("2.5"),
    )


@pytest.fixture
def recording_service() -> RecordingPaymentService:
    return RecordingPaymentService()


@pytest.fixture
def service_factory():
    """Build a RecordingPaymentService with a chosen outcome."""
    return RecordingPaymentService


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIME


@pytest.fixture
def sample_works_json() -> str:
    return """
    {
      "works": [
        {
          "id": "0x1234...5678",
          "title": "CRISPR-Cas9 Enhanced Metabolic Engineering for Sustainable Biofuel Production in Engineered Microorganisms",
          "authors": [
            {"name": "Dr. Sarah Chen", "wallet": "0xabcd...1234", "verified": true},
            {"name": "Dr. Michael Rodriguez", "wallet": "0xefgh...5678", "verified": true},
            {"name": "Dr. Elena Petrov", "wallet": "0xijkl...9012", "verified": false}
          ],
          "field": "Synthetic Biology",
          "publishDate": "2024-03-15",
          "citationReward": 5,
          "citations": 127,
          "totalEarned": 635
        }
      ]
    }
    """
