"""Tests for DXF import and export."""

import ezdxf
import pytest

from d25d.core.models import FaceStyle
from d25d.export.dxf_writer import build_axon_document, write_axon_dxf
from d25d.parsers.polyline_extractor import extract_raw_paths, read_raw_paths
from d25d.pipeline.wall_pipeline import process_walls
from d25d.topology.convert import golden_wall


@pytest.fixture
def golden_drawing():
    return process_walls([golden_wall()])


def test_extract_raw_paths_by_layer():
    doc = ezdxf.new()
    msp = doc.modelspace()
    msp.add_lwpolyline([(0, 0), (4000, 0), (4000, 3000), (0, 3000)], close=True, dxfattribs={"layer": "WALLS"})
    msp.add_polyline2d([(0, 0), (1000, 0)], dxfattribs={"layer": "WALLS"})
    msp.add_lwpolyline([(0, 0), (10, 10)], dxfattribs={"layer": "TEXT"})

    paths = extract_raw_paths(doc, layers=["WALLS"])

    assert len(paths) == 2
    assert paths[0].closed
    assert paths[0].points == [(0.0, 0.0), (4000.0, 0.0), (4000.0, 3000.0), (0.0, 3000.0)]
    assert not paths[1].closed
    assert paths[1].points == [(0.0, 0.0), (1000.0, 0.0)]

    assert len(extract_raw_paths(doc)) == 3


def test_extract_strips_repeated_closing_point():
    doc = ezdxf.new()
    doc.modelspace().add_lwpolyline([(0, 0), (10, 0), (10, 10), (0, 0)], close=True)

    paths = extract_raw_paths(doc)
    assert len(paths[0].points) == 3


def test_document_layers_and_order(golden_drawing):
    doc = build_axon_document(golden_drawing)
    polylines = list(doc.modelspace().query("LWPOLYLINE"))

    assert "AXON-TOP" in doc.layers
    assert "AXON-SIDE" in doc.layers
    assert len(polylines) == len(golden_drawing.faces) == 5
    assert len(doc.modelspace().query("HATCH")) == 5

    layers = [p.dxf.layer for p in polylines]
    expected = ["AXON-TOP" if f.style == FaceStyle.TOP else "AXON-SIDE" for f in golden_drawing.faces]
    assert layers == expected
    assert all(p.closed for p in polylines)


def test_document_without_fill(golden_drawing):
    doc = build_axon_document(golden_drawing, fill=False)
    assert len(doc.modelspace().query("HATCH")) == 0


def test_custom_layer_names(golden_drawing):
    doc = build_axon_document(golden_drawing, layers={"top": "ROOF", "side": "WALL"})
    layers = {p.dxf.layer for p in doc.modelspace().query("LWPOLYLINE")}
    assert layers == {"ROOF", "WALL"}


def test_write_and_read_back(tmp_path, golden_drawing):
    """Written faces come back as closed paths with y mirrored."""
    out = write_axon_dxf(golden_drawing, tmp_path / "out" / "golden.dxf")
    assert out.exists()

    paths = read_raw_paths(out)
    assert len(paths) == 5

    for path, face in zip(paths, golden_drawing.faces):
        assert path.closed
        expected = [(p.x, -p.y) for p in face.points]
        for (x, y), (ex, ey) in zip(path.points, expected):
            assert x == pytest.approx(ex)
            assert y == pytest.approx(ey)


def test_read_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_raw_paths(tmp_path / "absent.dxf")
