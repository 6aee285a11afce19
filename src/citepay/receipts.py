"""Export citation payment receipts to Word documents."""
import logging
import os
from datetime import datetime
from typing import Optional

from docx import Document

from .config import Config
from .fees import FeeCalculator
from .models import Receipt, Work

logger = logging.getLogger(__name__)


def receipt_filename(receipt: Receipt) -> str:
    safe_id = "".join(c if c.isalnum() or c in "-_" else "_" for c in receipt.receipt_id)
    return f"citation_receipt_{safe_id}.docx"


def save_receipt_to_word(
    receipt: Receipt,
    work: Work,
    folder: Optional[str] = None,
    filename: Optional[str] = None,
    fee_calculator: Optional[FeeCalculator] = None
) -> str:
    """
    Write a receipt document with the citation, fee breakdown and payees.

    Args:
        receipt: Receipt from a successful citation payment
        work: The cited work
        folder: Output folder (Config.RECEIPT_FOLDER by default)
        filename: Output file name (derived from the receipt id by default)
        fee_calculator: Used for amount display

    Returns:
        Path of the saved document
    """
    folder = folder or Config.RECEIPT_FOLDER
    filename = filename or receipt_filename(receipt)
    calculator = fee_calculator or FeeCalculator()
    attempt = receipt.attempt

    os.makedirs(folder, exist_ok=True)
    doc = Document()
    doc.add_heading("Citation Receipt", level=1)
    doc.add_paragraph(
        f"Generated {datetime.now():%Y-%m-%d %H:%M}. "
        f"Receipt {receipt.receipt_id} for work {work.identifier}."
    )

    doc.add_heading(f"Citation ({attempt.style.value})", level=2)
    doc.add_paragraph(receipt.citation)

    doc.add_heading("Payment", level=2)
    table = doc.add_table(rows=0, cols=2)
    rows = [
        ("Citation Fee", calculator.format_amount(attempt.amount)),
        ("Network Fee", calculator.format_amount(attempt.network_fee)),
        ("Total", calculator.format_amount(attempt.total)),
        ("Submitted", attempt.timestamp.isoformat()),
    ]
    if attempt.purpose:
        rows.append(("Purpose", attempt.purpose))
    for label, value in rows:
        cells = table.add_row().cells
        cells[0].text = label
        cells[1].text = value

    doc.add_heading("Payees", level=2)
    if attempt.payees:
        for author in attempt.payees:
            doc.add_paragraph(f"{author.name} ({author.payment_address})", style="List Bullet")
    else:
        doc.add_paragraph("No verified authors.")

    path = Config.get_receipt_path(filename, folder)
    doc.save(path)
    logger.info(f"Saved receipt {receipt.receipt_id} to {path}")
    return path
