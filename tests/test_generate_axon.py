"""Tests for the generate_axon command line script."""

import json
import sys

import pytest

import generate_axon
from d25d.core.config import get_default_config


def test_load_walls_json_accepts_both_forms(tmp_path):
    path = tmp_path / "walls.json"
    path.write_text(json.dumps({
        "walls": [
            {"centerline": [[0, 0], [1000, 0]], "thickness": 200, "height": 2700},
            {"start": [0, 0], "end": [0, 1000]},
        ],
    }))

    walls = generate_axon.load_walls_json(str(path), get_default_config())

    assert walls[0]["centerline"] == [[0, 0], [1000, 0]]
    assert walls[1] == {
        "centerline": [[0, 0], [0, 1000]],
        "closed": False,
        "thickness": 200,
        "height": 2700,
    }


def test_mock_to_json(tmp_path, monkeypatch):
    out = tmp_path / "mock.json"
    monkeypatch.setattr(sys, "argv", ["generate_axon.py", "--mock", str(out), "--workers=2"])

    generate_axon.main()

    faces = json.loads(out.read_text())
    assert len(faces) == 20
    assert {f["style"] for f in faces} == {"top", "side"}


def test_missing_input_exits(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["generate_axon.py", str(tmp_path / "absent.json")])
    with pytest.raises(SystemExit):
        generate_axon.main()
