"""
Unit Tests for Visit Report Generation
"""
import os

import pytest

from carewatch.core.reports import VisitReportGenerator, VisitReport
from carewatch.core.scoring import Vitals


@pytest.fixture
def generator(tmp_path) -> VisitReportGenerator:
    return VisitReportGenerator(output_dir=str(tmp_path / "reports"))


@pytest.fixture
def red_entry(visit_service):
    entry = visit_service.create_visit_entry(
        client_id="client-1",
        carer_id="carer-1",
        agency_id="agency-1",
        selected_symptom_ids=["fall", "confusion", "retired"],
        vitals=Vitals(temperature=39, pulse=110, systolic_bp=150, diastolic_bp=95),
        note="Found on floor <kitchen> & disoriented",
    ).entry
    visit_service.add_correction_note(entry.id, "carer-1", "Fall was unwitnessed")
    return visit_service.get_visit_entry(entry.id)


class TestVisitReportGenerator:
    """PDF output."""

    def test_creates_output_dir(self, tmp_path):
        target = tmp_path / "nested" / "out"
        VisitReportGenerator(output_dir=str(target))
        assert target.is_dir()

    def test_generate_red_entry(self, generator, red_entry, catalog):
        report = generator.generate(red_entry, catalog)

        assert isinstance(report, VisitReport)
        assert report.visit_entry_id == red_entry.id
        assert report.report_id.startswith("VR-")
        assert os.path.exists(report.pdf_path)
        with open(report.pdf_path, "rb") as f:
            assert f.read(5) == b"%PDF-"

    def test_generate_green_entry_without_catalog(self, generator, visit_service):
        entry = visit_service.create_visit_entry("c", "k", "a", []).entry
        report = generator.generate(entry)
        assert os.path.getsize(report.pdf_path) > 0

    def test_to_dict(self, generator, red_entry, catalog):
        data = generator.generate(red_entry, catalog).to_dict()
        assert set(data) == {"report_id", "visit_entry_id", "generated_at", "pdf_path"}

    def test_unique_report_ids(self, generator, red_entry, catalog):
        first = generator.generate(red_entry, catalog)
        second = generator.generate(red_entry, catalog)
        assert first.report_id != second.report_id
