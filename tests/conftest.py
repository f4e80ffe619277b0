import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


LEASE_LINES = (
    "RESIDENTIAL LEASE AGREEMENT",
    "This lease agreement is made between the Landlord and the Tenant for the premises.",
    "1. Rent. The Tenant agrees to pay a monthly rent of $1,500 due on the 5th day.",
    "2. Late Fee. A late fee of $50 shall be charged if payment is delayed.",
    "3. Termination. Either party may terminate this agreement with 60 days notice.",
    "Governing law and jurisdiction: the parties hereby agree to arbitration.",
)


@pytest.fixture()
def lease_pdf_bytes() -> bytes:
    """Generate a one-page residential lease."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    y = 720
    for line in LEASE_LINES:
        c.drawString(72, y, line)
        y -= 18
    c.save()
    return buf.getvalue()
