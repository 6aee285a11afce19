"""Configuration loader with environment variable support."""
import os
from decimal import Decimal
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """Application configuration."""

    # Fees
    NETWORK_FEE: Decimal = Decimal(os.getenv("CITEPAY_NETWORK_FEE", "0.05"))
    DISPLAY_PRECISION: int = int(os.getenv("CITEPAY_DISPLAY_PRECISION", "2"))
    CURRENCY_SYMBOL: str = os.getenv("CITEPAY_CURRENCY_SYMBOL", "₮")
    MAX_AMOUNT: Decimal = Decimal(os.getenv("CITEPAY_MAX_AMOUNT", "1000000000"))

    # Citation styles
    DEFAULT_STYLE: str = os.getenv("CITEPAY_DEFAULT_STYLE", "APA")
    VENUE_TEMPLATE: str = os.getenv("CITEPAY_VENUE_TEMPLATE", "DeSci Journal of {field}")
    DEFAULT_VENUE: str = os.getenv("CITEPAY_DEFAULT_VENUE", "DeSci Journal")

    # Citation request
    PURPOSE_MAX_LENGTH: int = int(os.getenv("CITEPAY_PURPOSE_MAX_LENGTH", "500"))

    # Payment collaborator
    PAYMENT_API_URL: str = os.getenv("PAYMENT_API_URL", "")
    PAYMENT_TIMEOUT_SECONDS: float = float(os.getenv("CITEPAY_PAYMENT_TIMEOUT", "30"))
    SIMULATED_PAYMENT_DELAY: float = float(os.getenv("CITEPAY_SIMULATED_DELAY", "2"))

    # Work repository
    WORKS_API_URL: str = os.getenv("WORKS_API_URL", "")
    WORKS_FILE: str = os.getenv("WORKS_FILE", "works.json")

    # Receipts
    RECEIPT_FOLDER: str = os.getenv("RECEIPT_FOLDER", "receipts")

    # Web
    SECRET_KEY: str = os.getenv("SECRET_KEY", "citepay-dev")
    MAX_FLOWS: int = int(os.getenv("CITEPAY_MAX_FLOWS", "1000"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")

    @classmethod
    def get_receipt_path(cls, filename: str, folder: Optional[str] = None) -> str:
        """Get the full path to a receipt document."""
        return str(Path(folder or cls.RECEIPT_FOLDER) / filename)
