"""dummy_documents.py
Sample CV texts and in-memory documents (PDF, DOCX, PNG) built from them.
"""
import io
from typing import List

from docx import Document
from PIL import Image
from reportlab.pdfgen import canvas

# -------------------------------------------------------------------------
# SAMPLE CV TEXTS
# -------------------------------------------------------------------------
MINIMAL_CV_TEXT = "Jane Doe\nEmail: jane.doe@example.com"

SAMPLE_CV_TEXT = """Jane Doe
Senior Software Engineer
Bahnhofstrasse 10 | 8001 Zürich | +41 79 123 45 67 | jane.doe@example.com
linkedin.com/in/janedoe

Personal Data
Date of birth: 12.03.1990
Nationality: Swiss
Target role: Lead Engineer

Work Experience
03/2019 - heute Senior Software Engineer - Acme AG
- Built data pipelines in Python and Kafka
Technologies: Docker, Kubernetes
01/2015 - 02/2019
Software Engineer at Beta GmbH
Developed REST API services

Education
09/2010 - 06/2014 BSc Computer Science, ETH Zürich

Skills
Programming: Python, SQL, Java
Docker / Kubernetes

Languages
German: Muttersprache
English (C1), French B2
Italian

Certifications
AWS Solutions Architect - Amazon (05/2021)
Scrum Master 2018

Key Achievements
- Reduced cloud costs by 30%
- Led a team of 5 engineers
"""

GERMAN_CV_TEXT = """Lebenslauf
Vorname: Lukas
Nachname: Müller
Geburtsdatum: 05.07.1988
Adresse: Hauptgasse 5, 3011 Bern
Telefon: 031 123 45 67
E-Mail: lukas.mueller@example.ch

Berufserfahrung
Projektleiter bei Swisscom AG (04.2017 - aktuell)
Leitung von Scrum Teams

Ausbildung
2008 - 2012 Bachelor Informatik - Universität Bern

Sprachen
Deutsch: Muttersprache; Englisch: fliessend
"""

# ASCII-only text for PDF fixtures (standard PDF fonts)
PDF_CV_LINES = [
    "John Smith",
    "Email: john.smith@example.com",
    "Phone: +41 76 555 12 34",
    "Work Experience",
    "01/2018 - 12/2022 Data Engineer - Helvetia Insurance",
    "Maintained Airflow pipelines and PostgreSQL warehouses",
    "Designed reliable data models for reporting teams across the company",
    "Skills",
    "Python, Docker, SQL",
]


# -------------------------------------------------------------------------
# DOCUMENT BUILDERS
# -------------------------------------------------------------------------
def build_pdf_bytes(pages: List[List[str]]) -> bytes:
    """Build a PDF with one page per list of lines."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer)
    for lines in pages:
        y = 800
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buffer.getvalue()


def build_scanned_pdf_bytes(page_count: int = 1) -> bytes:
    """Build a PDF whose pages only hold graphics (no text layer), like a scan."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer)
    for _ in range(page_count):
        c.rect(72, 600, 300, 150, fill=1)
        c.showPage()
    c.save()
    return buffer.getvalue()


def build_docx_bytes(paragraphs: List[str]) -> bytes:
    """Build a Word document with one paragraph per string."""
    document = Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def build_png_bytes(width: int = 40, height: int = 20) -> bytes:
    """Build a blank white PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), "white").save(buffer, format="PNG")
    return buffer.getvalue()
