"""
Tests for the factedit CLI.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from factedit.cli import app, render_fact
from factedit.config import EditorConfig, save_config
from factedit.fact_store import FactStore
from factedit.types import Fact, Field


runner = CliRunner()


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    """Store directory seeded with one fact."""
    save_config(EditorConfig(path=tmp_path))
    with FactStore(tmp_path / "facts.db") as s:
        s.add([("Front", "Paris"), ("Back", "France")], tags="geography, capitals", id="paris")
        s.add([("Front", "2+2"), ("Back", "4")], tags="math", id="sum")
    return tmp_path


def _invoke(store_dir: Path, *args: str):
    return runner.invoke(app, ["--store", str(store_dir), *args])


def _stored(store_dir: Path, id: str) -> Fact:
    with FactStore(store_dir / "facts.db") as s:
        return s.get(id)


class TestRenderFact:

    def test_plain(self):
        fact = Fact(id="a", fields=[Field("Front", "x"), Field("Back", "y")], tags="t")
        assert render_fact(fact) == "id: a\nFront: x\nBack : y\ntags: t"

    def test_json(self):
        fact = Fact(id="a", fields=[Field("Front", "x")], tags="t")
        assert json.loads(render_fact(fact, as_json=True)) == {
            "id": "a", "fields": {"Front": "x"}, "tags": "t",
        }


class TestCommands:

    def test_add_and_show(self, store_dir):
        result = _invoke(store_dir, "add", "-f", "Front=Rome", "-f", "Back=Italy", "-t", "geography")
        assert result.exit_code == 0, result.output
        fact_id = result.output.strip()

        result = _invoke(store_dir, "show", fact_id, "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["fields"] == {"Front": "Rome", "Back": "Italy"}
        assert data["tags"] == "geography"

    def test_add_requires_field(self, store_dir):
        result = _invoke(store_dir, "add")
        assert result.exit_code == 1

    def test_show_missing(self, store_dir):
        result = _invoke(store_dir, "show", "nope")
        assert result.exit_code == 1

    def test_tags(self, store_dir):
        result = _invoke(store_dir, "tags", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output) == ["capitals", "geography", "math"]

    def test_list(self, store_dir):
        result = _invoke(store_dir, "list", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert {d["id"] for d in data} == {"paris", "sum"}

        result = _invoke(store_dir, "list", "--limit", "1")
        assert result.exit_code == 0
        assert len(result.output.strip().splitlines()) == 1

    def test_delete(self, store_dir):
        result = _invoke(store_dir, "delete", "sum")
        assert result.exit_code == 0, result.output
        assert _stored(store_dir, "sum") is None
        assert _invoke(store_dir, "delete", "sum").exit_code == 1


class TestEdit:

    def test_field_change(self, store_dir):
        result = _invoke(store_dir, "edit", "paris", "-f", "Front=paris")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "modified"
        assert _stored(store_dir, "paris").fields[0].value == "paris"

    def test_no_change(self, store_dir):
        result = _invoke(store_dir, "edit", "paris", "-f", "Front=Paris")
        assert result.exit_code == 0
        assert result.output.strip() == "unchanged"

    def test_toggle_and_new_tag(self, store_dir):
        result = _invoke(store_dir, "edit", "paris", "-T", "capitals", "-n", "europe")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "modified"
        assert _stored(store_dir, "paris").tags == "europe, geography"

    def test_tags_verbatim(self, store_dir):
        result = _invoke(store_dir, "edit", "paris", "-t", "geography,capitals")
        assert result.output.strip() == "modified"
        assert _stored(store_dir, "paris").tags == "geography,capitals"

    def test_unknown_toggle(self, store_dir):
        result = _invoke(store_dir, "edit", "paris", "-T", "atlantis")
        assert result.exit_code == 1
        assert _stored(store_dir, "paris").tags == "geography, capitals"

    def test_empty_new_tag(self, store_dir):
        result = _invoke(store_dir, "edit", "paris", "-n", " ")
        assert result.exit_code == 1

    def test_unknown_field(self, store_dir):
        result = _invoke(store_dir, "edit", "paris", "-f", "Nope=x")
        assert result.exit_code == 1

    def test_bad_field_format(self, store_dir):
        result = _invoke(store_dir, "edit", "paris", "-f", "Front")
        assert result.exit_code == 1

    def test_fix_arabic_blocks_edits(self, store_dir):
        save_config(EditorConfig(path=store_dir, fix_arabic=True))
        result = _invoke(store_dir, "edit", "paris", "-f", "Front=Lyon")
        assert result.exit_code == 1
        assert _stored(store_dir, "paris").fields[0].value == "Paris"

    def test_fix_arabic_without_edits(self, store_dir):
        save_config(EditorConfig(path=store_dir, fix_arabic=True))
        result = _invoke(store_dir, "edit", "paris")
        assert result.exit_code == 0
        assert result.output.strip() == "unchanged"
