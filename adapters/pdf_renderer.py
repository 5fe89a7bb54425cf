"""
PDF report rendering.

Lays out a report built by the section builder with ReportLab's Platypus
engine: title, header lines, summary, then one block per section. Sections
and items are drawn in the order given; the renderer never reorders or
filters them.
"""

from io import BytesIO
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer

from models.schemas import OrderedSection

HEADING_COLOR = colors.HexColor("#1a365d")
MUTED_COLOR = colors.HexColor("#718096")


def _build_styles() -> dict:
    """Paragraph styles used in reports."""
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "ReportTitle",
            parent=base["Title"],
            fontSize=18,
            textColor=HEADING_COLOR,
            alignment=TA_CENTER,
            spaceAfter=12,
        ),
        "header": ParagraphStyle(
            "ReportHeader",
            parent=base["Normal"],
            fontSize=12,
            leading=16,
            alignment=TA_LEFT,
        ),
        "heading": ParagraphStyle(
            "SectionHeading",
            parent=base["Heading2"],
            textColor=HEADING_COLOR,
            spaceBefore=12,
            spaceAfter=6,
        ),
        "body": ParagraphStyle("Body", parent=base["Normal"], fontSize=10.5, leading=14),
        "question": ParagraphStyle(
            "Question",
            parent=base["Normal"],
            fontSize=11,
            leading=14,
            spaceBefore=6,
        ),
        "answer": ParagraphStyle(
            "Answer",
            parent=base["Normal"],
            fontSize=11,
            leading=14,
            leftIndent=20,
        ),
        "notes": ParagraphStyle(
            "Notes",
            parent=base["Normal"],
            fontSize=9.5,
            leading=12,
            leftIndent=20,
            textColor=MUTED_COLOR,
        ),
    }


def _text(value: str) -> str:
    """Escape text for Paragraph markup and keep line breaks."""
    return escape(value).replace("\n", "<br/>")


def render_report_pdf(
    title: str,
    header_lines: Sequence[str],
    sections: Sequence[OrderedSection],
    summary: Optional[str] = None,
) -> bytes:
    """
    Render a report to PDF bytes.

    Args:
        title: Report title
        header_lines: Lines under the title (agency, date, tier level)
        sections: Ordered sections from the section builder
        summary: Optional summary text

    Returns:
        PDF document as bytes
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=letter,
        leftMargin=0.9 * inch,
        rightMargin=0.9 * inch,
        topMargin=0.8 * inch,
        bottomMargin=0.8 * inch,
        title=title,
    )
    styles = _build_styles()

    story: List = [Paragraph(_text(title), styles["title"])]
    for line in header_lines:
        story.append(Paragraph(_text(line), styles["header"]))
    story.append(Spacer(1, 0.2 * inch))

    if summary:
        story.append(Paragraph("Assessment Summary", styles["heading"]))
        story.append(Paragraph(_text(summary), styles["body"]))
        story.append(Spacer(1, 0.15 * inch))

    if sections:
        story.append(HRFlowable(width="100%", thickness=0.5, color=MUTED_COLOR))

    for section in sections:
        story.append(Paragraph(_text(section.category_name), styles["heading"]))
        for item in section.items:
            story.append(Paragraph(_text(item.question_text), styles["question"]))
            story.append(Paragraph(f"&bull; {_text(item.response_text)}", styles["answer"]))
            if item.notes:
                story.append(Paragraph(f"Notes: {_text(item.notes)}", styles["notes"]))

    doc.build(story)
    return buffer.getvalue()
