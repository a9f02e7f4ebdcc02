import json

import pytest

from main import main, match_person_id, parse_person_id
from models import Person


@pytest.fixture
def roster_file(tmp_path):
    path = tmp_path / "family.json"
    path.write_text(
        json.dumps(
            {
                "familyMembers": [
                    {"id": 1, "name": "Root", "fatherId": 2, "motherId": 3},
                    {"id": 2, "name": "Dad", "spouseIds": [3]},
                    {"id": 3, "name": "Mum", "spouseIds": [2]},
                ]
            }
        )
    )
    return path


def test_parse_person_id():
    assert parse_person_id("12") == 12
    assert parse_person_id("p_1a") == "p_1a"


def test_match_person_id_prefers_roster_ids():
    roster = [Person(id="1", name="A"), Person(id=2, name="B")]
    assert match_person_id("1", roster) == "1"
    assert match_person_id("2", roster) == 2
    assert match_person_id("7", roster) == 7
    assert match_person_id(None, roster) is None


def test_writes_layout(roster_file, tmp_path, capsys):
    out = tmp_path / "tree.json"
    assert main([str(roster_file), "--root", "1", "-o", str(out)]) == 0

    data = json.loads(out.read_text())
    assert len(data["nodes"]) == 3
    printed = capsys.readouterr().out
    assert "Found 3 people" in printed
    assert "No validation issues found" in printed
    assert "Placed 3 people and 5 lines around Root" in printed
    assert "Done!" in printed


def test_default_output_next_to_roster(roster_file):
    assert main([str(roster_file), "--root", "1", "--no-validate"]) == 0
    assert (roster_file.parent / "family_tree.png").exists()


def test_without_root_lists_people(roster_file, capsys):
    assert main([str(roster_file)]) == 0
    printed = capsys.readouterr().out
    assert "Pick a root person" in printed
    assert "  2: Dad" in printed


def test_unknown_root_writes_nothing(roster_file, tmp_path, capsys):
    out = tmp_path / "tree.json"
    assert main([str(roster_file), "--root", "42", "-o", str(out)]) == 0
    assert not out.exists()
    assert "No person with id 42" in capsys.readouterr().out


def test_free_text_resolver(tmp_path):
    path = tmp_path / "labels.json"
    path.write_text(
        json.dumps(
            [
                {"id": 1, "name": "Me", "relationship": "Self"},
                {"id": 2, "name": "Dad", "relationship": "Father"},
                {"id": 3, "name": "Kid", "relationship": "Daughter"},
            ]
        )
    )
    out = tmp_path / "tree.json"
    assert main([str(path), "--root", "1", "--resolver", "free-text", "-o", str(out)]) == 0
    assert len(json.loads(out.read_text())["nodes"]) == 3


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.json"), "--root", "1"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_bad_env_config(roster_file, monkeypatch, capsys):
    monkeypatch.setenv("FAMTREE_NODE_WIDTH", "wide")
    assert main([str(roster_file), "--root", "1"]) == 1
    assert "FAMTREE_NODE_WIDTH must be a number" in capsys.readouterr().err


def test_roster_with_string_ids(tmp_path, capsys):
    path = tmp_path / "family.json"
    path.write_text(
        json.dumps(
            [
                {"id": "1", "name": "Me", "relationship": "Self", "fatherId": "2"},
                {"id": "2", "name": "Dad", "relationship": "Father"},
            ]
        )
    )
    out = tmp_path / "tree.json"
    assert main([str(path), "--root", "1", "-o", str(out)]) == 0
    assert [n["id"] for n in json.loads(out.read_text())["nodes"]] == ["2", "1"]
    assert "around Me" in capsys.readouterr().out

    out = tmp_path / "labels.json"
    args = [str(path), "--root", "1", "--resolver", "free-text", "--self", "1", "-o", str(out)]
    assert main(args) == 0
    assert len(json.loads(out.read_text())["nodes"]) == 2
