"""
Visit Summary Report Generator

One-page PDF for a single visit entry, for handover or for a manager
reviewing an alert:
- Colour-coded risk badge and score
- Contributing factors in scoring order
- Recorded vitals
- Carer note and any correction notes
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import os
import uuid

from reportlab.lib.pagesizes import A4
from reportlab.lib.colors import HexColor, white
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.lib.enums import TA_CENTER
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, Flowable
)
from xml.sax.saxutils import escape

from carewatch.core.scoring import RiskLevel, SymptomCatalog, format_reading
from carewatch.core.visits import VisitEntry
from carewatch.utils import get_logger
from carewatch.utils.exceptions import ReportGenerationError

logger = get_logger(__name__)


RISK_COLORS = {
    RiskLevel.GREEN: HexColor("#22C55E"),
    RiskLevel.AMBER: HexColor("#F59E0B"),
    RiskLevel.RED:   HexColor("#EF4444"),
}

RISK_LABELS = {
    RiskLevel.GREEN: "Green - No Concerns Flagged",
    RiskLevel.AMBER: "Amber - Manager Review Recommended",
    RiskLevel.RED:   "Red - Manager Review Required",
}

VITAL_ROWS = [
    ("temperature", "Temperature", "°C"),
    ("pulse", "Pulse", "bpm"),
    ("systolic_bp", "Blood Pressure (Systolic)", "mmHg"),
    ("diastolic_bp", "Blood Pressure (Diastolic)", "mmHg"),
    ("oxygen_saturation", "Oxygen Saturation", "%"),
    ("respiratory_rate", "Respiratory Rate", "/min"),
]


@dataclass
class VisitReport:
    """Metadata for a generated visit report."""
    report_id: str
    visit_entry_id: str
    generated_at: datetime
    pdf_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report_id": self.report_id,
            "visit_entry_id": self.visit_entry_id,
            "generated_at": self.generated_at.isoformat(),
            "pdf_path": self.pdf_path,
        }


class RiskBadge(Flowable):
    """Rounded colour block carrying the risk label."""

    def __init__(self, risk_level: RiskLevel, width: float = 300, height: float = 40):
        Flowable.__init__(self)
        self.risk_level = risk_level
        self.width = width
        self.height = height

    def draw(self):
        label = RISK_LABELS[self.risk_level]
        self.canv.setFillColor(RISK_COLORS[self.risk_level])
        self.canv.roundRect(0, 0, self.width, self.height, 8, fill=1, stroke=0)

        self.canv.setFillColor(white)
        self.canv.setFont("Helvetica-Bold", 13)
        text_width = self.canv.stringWidth(label, "Helvetica-Bold", 13)
        self.canv.drawString((self.width - text_width) / 2, self.height / 2.5, label)


class VisitReportGenerator:
    """Renders VisitEntry records to PDF."""

    def __init__(self, output_dir: str = "reports"):
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

        self._styles = getSampleStyleSheet()
        self._create_custom_styles()
        logger.info(f"VisitReportGenerator initialized, output: {output_dir}")

    def _create_custom_styles(self):
        if 'ReportTitle' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='ReportTitle',
                parent=self._styles['Title'],
                fontSize=22,
                spaceAfter=18,
                textColor=HexColor("#1E40AF"),
                alignment=TA_CENTER,
                fontName='Helvetica-Bold'
            ))

        if 'SectionHeader' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='SectionHeader',
                parent=self._styles['Heading2'],
                fontSize=14,
                spaceBefore=18,
                spaceAfter=8,
                textColor=HexColor("#1F2937"),
                fontName='Helvetica-Bold'
            ))

        if 'Caveat' not in self._styles:
            self._styles.add(ParagraphStyle(
                name='Caveat',
                parent=self._styles['Normal'],
                fontSize=9,
                textColor=HexColor("#6B7280"),
                spaceBefore=5,
            ))

    def generate(
        self,
        entry: VisitEntry,
        catalog: Optional[SymptomCatalog] = None,
    ) -> VisitReport:
        """
        Build the PDF for one visit entry.

        Args:
            entry: Stored visit entry.
            catalog: Used to list selected symptoms by label; ids missing
                     from the catalog are shown as retired.
        """
        report = VisitReport(
            report_id=f"VR-{uuid.uuid4().hex[:12].upper()}",
            visit_entry_id=entry.id,
            generated_at=datetime.now(timezone.utc),
        )
        try:
            report.pdf_path = self._generate_pdf(report, entry, catalog)
        except (OSError, ValueError) as exc:
            logger.error(f"Visit report {report.report_id} failed: {exc}", exc_info=True)
            raise ReportGenerationError(
                f"Could not generate report for visit entry {entry.id}: {exc}",
                details={"visit_entry_id": entry.id},
            ) from exc
        return report

    def _generate_pdf(
        self,
        report: VisitReport,
        entry: VisitEntry,
        catalog: Optional[SymptomCatalog],
    ) -> str:
        filepath = os.path.join(self.output_dir, f"{report.report_id}.pdf")

        doc = SimpleDocTemplate(
            filepath,
            pagesize=A4,
            rightMargin=0.75*inch,
            leftMargin=0.75*inch,
            topMargin=0.75*inch,
            bottomMargin=0.75*inch
        )

        story = []
        story.append(Paragraph("Visit Summary", self._styles['ReportTitle']))
        story.append(Paragraph(
            f"Report ID: <b>{report.report_id}</b> | Visit: {escape(entry.id)} | "
            f"Recorded: {entry.created_at.strftime('%d %B %Y at %H:%M')}",
            self._styles['Caveat']
        ))
        story.append(Paragraph(
            f"Client: {escape(entry.client_id)} | Carer: {escape(entry.carer_id)}",
            self._styles['Caveat']
        ))
        story.append(Spacer(1, 18))

        # ===== RISK =====
        story.append(RiskBadge(entry.risk_level))
        story.append(Spacer(1, 8))
        story.append(Paragraph(f"Score: <b>{entry.score}</b>", self._styles['Normal']))

        # ===== CONTRIBUTING FACTORS =====
        story.append(Paragraph("Contributing Factors", self._styles['SectionHeader']))
        if entry.reasons:
            for reason in entry.reasons:
                story.append(Paragraph(f"• {escape(reason)}", self._styles['Normal']))
        else:
            story.append(Paragraph("None recorded.", self._styles['Normal']))

        # ===== SYMPTOMS =====
        if entry.selected_symptom_ids:
            story.append(Paragraph("Symptoms Selected", self._styles['SectionHeader']))
            for symptom_id in entry.selected_symptom_ids:
                symptom = catalog.lookup(symptom_id) if catalog else None
                label = symptom.label if symptom else f"{symptom_id} (retired)"
                story.append(Paragraph(f"• {escape(label)}", self._styles['Normal']))

        # ===== VITALS =====
        recorded = entry.vitals.recorded()
        story.append(Paragraph("Vitals", self._styles['SectionHeader']))
        if recorded:
            table_data = [["Reading", "Value"]]
            for name, label, unit in VITAL_ROWS:
                if name in recorded:
                    table_data.append([label, f"{format_reading(recorded[name])} {unit}"])

            vitals_table = Table(table_data, colWidths=[3.0*inch, 2.0*inch])
            vitals_table.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (-1, 0), HexColor("#1E40AF")),
                ('TEXTCOLOR', (0, 0), (-1, 0), white),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
                ('GRID', (0, 0), (-1, -1), 0.5, HexColor("#D1D5DB")),
                ('FONTSIZE', (0, 0), (-1, -1), 10),
                ('TOPPADDING', (0, 0), (-1, -1), 6),
                ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
            ]))
            story.append(vitals_table)
        else:
            story.append(Paragraph("No vitals recorded.", self._styles['Normal']))

        # ===== NOTES =====
        if entry.note:
            story.append(Paragraph("Carer Note", self._styles['SectionHeader']))
            story.append(Paragraph(escape(entry.note), self._styles['Normal']))

        if entry.correction_notes:
            story.append(Paragraph("Corrections", self._styles['SectionHeader']))
            for correction in entry.correction_notes:
                story.append(Paragraph(
                    f"{correction.created_at.strftime('%d %b %Y %H:%M')} - {escape(correction.text)}",
                    self._styles['Normal']
                ))

        story.append(Spacer(1, 24))
        story.append(Paragraph(
            "<b>Note:</b> The risk level is a rule-based prompt for manager review, "
            "not a clinical diagnosis.",
            self._styles['Caveat']
        ))

        doc.build(story)
        logger.info(f"Visit report generated: {filepath}")
        return filepath
