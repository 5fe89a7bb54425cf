"""
Tests for PDF report rendering.
"""

from adapters.pdf_renderer import render_report_pdf
from models.schemas import OrderedSection, ReportItem


class TestRenderReportPdf:
    """Tests for render_report_pdf."""

    def test_renders_pdf_bytes(self):
        sections = [
            OrderedSection(category_name="Mission Profiles", items=[
                ReportItem(question_text="Hostage rescue?", response_text="Yes", notes="Trained quarterly"),
                ReportItem(question_text="Barricade response?", response_text="No"),
            ]),
        ]
        pdf = render_report_pdf(
            "SWAT TIER LEVEL ASSESSMENT REPORT",
            ["Agency: Metro SWAT", "Date: May 01, 2024", "Tier Level: 2"],
            sections,
            summary="Summary:\nTier 2 classification.",
        )

        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000

    def test_markup_characters_escaped(self):
        sections = [
            OrderedSection(category_name="Breaching <Ops> & Entry", items=[
                ReportItem(question_text="Ratio < 1:5 & > 1:10?", response_text="<none>"),
            ]),
        ]
        assert render_report_pdf("Report", [], sections).startswith(b"%PDF")

    def test_no_sections(self):
        assert render_report_pdf("SWAT GAP ANALYSIS REPORT", ["Agency: Metro SWAT"], []).startswith(b"%PDF")
