"""Tests for the pharma-pitch CLI."""

import json
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from pharma_pitch.cli import app
from pharma_pitch.config.settings import clear_settings_cache
from pharma_pitch.constants import BRANDS_KEY, DOCTORS_KEY
from pharma_pitch.ingest.analysis import UploadAnalysis
from pharma_pitch.presentation.session import EMPTY_MESSAGE
from pharma_pitch.storage.persistence import serialize_brands, serialize_doctors

runner = CliRunner()


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("PHARMA_PITCH_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    clear_settings_cache()
    yield tmp_path
    clear_settings_cache()


@pytest.fixture
def seeded(data_dir, catalog, doctor):
    store_dir = data_dir / "store"
    store_dir.mkdir()
    (store_dir / f"{BRANDS_KEY}.json").write_text(serialize_brands(catalog))
    (store_dir / f"{DOCTORS_KEY}.json").write_text(serialize_doctors([doctor]))
    return data_dir


def _stored(data_dir, key):
    return json.loads((data_dir / "store" / f"{key}.json").read_text())


class TestCatalogCommands:
    def test_status_empty(self, data_dir):
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "Doctors:" in result.output

    def test_brands_listing(self, seeded):
        result = runner.invoke(app, ["brands"])
        assert result.exit_code == 0
        assert "Cardiovex" in result.output
        assert "Neurolax" in result.output

    def test_upload_creates_brand(self, data_dir):
        image = data_dir / "cover.png"
        image.write_bytes(b"\x89PNG\r\n\x1a\n")
        analysis = UploadAnalysis(brand_name="Oncora", description="Oncology support")
        with patch(
            "pharma_pitch.ingest.upload.analyze_upload", AsyncMock(return_value=analysis)
        ):
            result = runner.invoke(app, ["upload", str(image)])
        assert result.exit_code == 0, result.output
        assert "Oncora" in result.output
        brands = _stored(data_dir, BRANDS_KEY)
        assert brands[0]["name"] == "Oncora"
        assert brands[0]["slides"][0]["name"] == "Main Slide"

    def test_upload_rejects_unsupported_type(self, data_dir):
        notes = data_dir / "notes.txt"
        notes.write_text("hello")
        result = runner.invoke(app, ["upload", str(notes)])
        assert result.exit_code == 1
        assert "Unsupported file type" in result.output

    def test_slide_editing(self, seeded):
        assert runner.invoke(app, ["move-slide", "Cardiovex", "s2", "--left"]).exit_code == 0
        assert [s["id"] for s in _stored(seeded, BRANDS_KEY)[0]["slides"]] == ["s2", "s1"]
        assert runner.invoke(app, ["rename-slide", "A", "s1", "Safety"]).exit_code == 0
        assert runner.invoke(app, ["remove-slide", "A", "s2"]).exit_code == 0
        slides = _stored(seeded, BRANDS_KEY)[0]["slides"]
        assert [(s["id"], s["name"], s["order"]) for s in slides] == [("s1", "Safety", 0)]

    def test_move_slide_needs_one_direction(self, seeded):
        result = runner.invoke(app, ["move-slide", "A", "s1"])
        assert result.exit_code == 1

    def test_unknown_slide(self, seeded):
        result = runner.invoke(app, ["rename-slide", "A", "s3", "Wrong Brand"])
        assert result.exit_code == 1
        assert "Slide 's3' not found" in result.output

    def test_unknown_brand(self, seeded):
        result = runner.invoke(app, ["slides", "Nope"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_delete_brand(self, seeded):
        result = runner.invoke(app, ["delete-brand", "Neurolax", "--yes"])
        assert result.exit_code == 0
        assert [b["id"] for b in _stored(seeded, BRANDS_KEY)] == ["A"]


class TestDoctorCommands:
    def test_add_and_search(self, seeded):
        result = runner.invoke(
            app, ["add-doctor", "Dr. Lee", "--specialty", "Oncology", "--brand", "Neurolax"]
        )
        assert result.exit_code == 0, result.output
        doctors = _stored(seeded, DOCTORS_KEY)
        assert doctors[1]["assignedBrandIds"] == ["B"]
        assert doctors[1]["hospital"] == "General Hospital"
        result = runner.invoke(app, ["doctors", "--search", "onco"])
        assert "Lee" in result.output
        assert "Jane Smith" not in result.output

    def test_add_requires_specialty_text(self, seeded):
        result = runner.invoke(app, ["add-doctor", "Dr. Lee", "--specialty", " "])
        assert result.exit_code == 1
        assert "specialty is required" in result.output

    def test_edit_keeps_saved_playlist(self, seeded):
        doctors = _stored(seeded, DOCTORS_KEY)
        doctors[0]["savedSlideIds"] = ["s3"]
        (seeded / "store" / f"{DOCTORS_KEY}.json").write_text(json.dumps(doctors))
        result = runner.invoke(
            app, ["edit-doctor", "d1", "--hospital", "City Clinic", "--toggle-brand", "A"]
        )
        assert result.exit_code == 0, result.output
        edited = _stored(seeded, DOCTORS_KEY)[0]
        assert edited["hospital"] == "City Clinic"
        assert edited["assignedBrandIds"] == ["B"]
        assert edited["savedSlideIds"] == ["s3"]

    def test_delete_doctor(self, seeded):
        result = runner.invoke(app, ["delete-doctor", "Dr. Jane Smith", "--yes"])
        assert result.exit_code == 0
        assert _stored(seeded, DOCTORS_KEY) == []

    def test_reset(self, seeded):
        result = runner.invoke(app, ["reset", "--yes"])
        assert result.exit_code == 0
        assert not (seeded / "store" / f"{BRANDS_KEY}.json").exists()
        assert not (seeded / "store" / f"{DOCTORS_KEY}.json").exists()


class TestPresent:
    def test_brand_preview(self, seeded):
        result = runner.invoke(app, ["present", "--brand", "Cardiovex"], input="\nq\n")
        assert result.exit_code == 0, result.output
        assert "Current Brand" in result.output
        assert "1 / 2" in result.output
        assert "2 / 2" in result.output

    def test_doctor_pitch_walks_assigned_brands(self, seeded):
        result = runner.invoke(app, ["present", "--doctor", "d1"], input="n\nn\nq\n")
        assert result.exit_code == 0, result.output
        assert "Pitching to:" in result.output
        assert "Neurolax" in result.output

    def test_custom_selection_saved_as_default(self, seeded):
        result = runner.invoke(
            app,
            ["present", "-d", "d1", "-s", "s3", "-s", "s1", "--save-default"],
            input="q\n",
        )
        assert result.exit_code == 0, result.output
        assert "Custom Presentation" in result.output
        assert _stored(seeded, DOCTORS_KEY)[0]["savedSlideIds"] == ["s1", "s3"]

    def test_empty_selection_shows_empty_state(self, seeded):
        result = runner.invoke(app, ["present", "-s", "gone"], input="q\n")
        assert result.exit_code == 0, result.output
        assert EMPTY_MESSAGE in result.output

    def test_end_of_input_closes(self, seeded):
        result = runner.invoke(app, ["present"])
        assert result.exit_code == 0, result.output
