"""Tests for the offline form CLI commands."""

import json
import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent.parent

SCHEMA = {
    "formId": "form-1",
    "formFields": [
        {"id": "name", "type": "SHORT_TEXT", "header": "Your name", "required": True},
        {"id": "meal", "type": "CHOICE", "header": "Meal", "choices": ["Veg", "Meat"]},
    ],
}


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        cwd=PROJECT_ROOT,
        timeout=60,
    )


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    path = tmp_path / "form.json"
    path.write_text(json.dumps(SCHEMA))
    return path


@pytest.mark.integration
class TestFormCommands:
    """Tests for catalog, validate, render and check-response."""

    def test_catalog_json(self):
        """catalog --json prints every field type."""
        result = _run("catalog", "--json")
        assert result.returncode == 0
        types = [entry["type"] for entry in json.loads(result.stdout)]
        assert "SHORT_TEXT" in types
        assert "CHECKBOX" in types

    def test_validate_ok(self, schema_file):
        """A complete schema validates cleanly."""
        assert _run("validate", str(schema_file)).returncode == 0

    def test_validate_reports_problems(self, tmp_path):
        """Blank headers are reported and fail the command."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"id": "q", "type": "SHORT_TEXT"}]))
        result = _run("validate", str(path))
        assert result.returncode == 1
        assert "missing_header" in result.stdout

    def test_render_builder_tree(self, schema_file):
        """Builder mode shows drag handles."""
        result = _run("render", str(schema_file), "--mode", "builder")
        assert result.returncode == 0
        assert result.stdout.startswith("form [builder]")
        assert "drag_handle" in result.stdout

    def test_check_response(self, schema_file, tmp_path):
        """An unanswered required question fails the check."""
        answers = tmp_path / "answers.json"
        answers.write_text(json.dumps([{"formFieldId": "name", "textField": ""}]))
        result = _run("check-response", str(schema_file), str(answers))
        assert result.returncode == 1
        assert "name" in result.stdout

        answers.write_text(json.dumps([{"formFieldId": "name", "textField": "Ada"}]))
        assert _run("check-response", str(schema_file), str(answers)).returncode == 0

    def test_unknown_command(self):
        """Unknown commands exit non-zero."""
        assert _run("frobnicate").returncode == 1
