"""Tests for path simplification."""

from d25d.core.geometry_utils import signed_area
from d25d.core.models import RawPath
from d25d.simplification.path_simplifier import (
    SimplifyOptions,
    douglas_peucker,
    equalize_path_direction,
    is_closed_path,
    reduce_points,
    remove_small_segments,
    simplify,
    simplify_raw_paths,
    smooth_paths,
)


NOISY_LINE = [[0, 0], [10, 0.3], [20, -0.2], [30, 0.4], [40, 0], [50, 25], [60, 0]]


def test_douglas_peucker_keeps_endpoints():
    """First and last points always survive."""
    result = douglas_peucker([NOISY_LINE], tolerance=1.0)[0]
    assert result[0] == NOISY_LINE[0]
    assert result[-1] == NOISY_LINE[-1]


def test_douglas_peucker_drops_noise():
    """Points within tolerance of the chord are removed, the spike is kept."""
    result = douglas_peucker([NOISY_LINE], tolerance=1.0)[0]
    assert result == [[0, 0], [40, 0], [50, 25], [60, 0]]


def test_douglas_peucker_result_is_subsequence():
    """Output points are input points, in input order."""
    result = reduce_points(NOISY_LINE, 1.0)
    indices = [NOISY_LINE.index(p) for p in result]
    assert indices == sorted(indices)


def test_douglas_peucker_idempotent():
    """Simplifying twice gives the same result as once."""
    once = douglas_peucker([NOISY_LINE], tolerance=1.0)
    twice = douglas_peucker(once, tolerance=1.0)
    assert once == twice


def test_douglas_peucker_short_paths_untouched():
    """Paths with two or fewer points are returned as they are."""
    paths = [[[0, 0], [5, 5]], [[1, 1]]]
    assert douglas_peucker(paths, 1.0) == paths


def test_malformed_input_passes_through():
    """Non-path input is returned unchanged, never raised on."""
    assert douglas_peucker(None, 1.0) is None
    assert douglas_peucker("not paths", 1.0) == "not paths"
    assert simplify([]) == []
    assert remove_small_segments(42) == 42


def test_malformed_path_inside_list_passes_through():
    """A bad path among good ones is kept as is."""
    paths = [NOISY_LINE, "garbage"]
    result = douglas_peucker(paths, 1.0)
    assert result[1] == "garbage"


def test_is_closed_path():
    """Closure needs three points and coinciding ends."""
    assert is_closed_path([[0, 0], [10, 0], [10, 10], [0.5, 0]])
    assert not is_closed_path([[0, 0], [0.5, 0]])
    assert not is_closed_path([[0, 0], [10, 0], [10, 10]])


def test_remove_small_segments():
    """Points closer than min_length to the last kept point are dropped."""
    path = [[0, 0], [0.5, 0], [1, 0], [10, 0], [10.5, 0], [20, 0]]
    result = remove_small_segments([path], min_length=2.0)[0]
    assert result == [[0, 0], [10, 0], [20, 0]]


def test_remove_small_segments_collapsed_path():
    """A path shorter than min_length keeps its first and last point."""
    path = [[0, 0], [0.5, 0], [1, 0]]
    result = remove_small_segments([path], min_length=2.0)[0]
    assert result == [[0, 0], [1, 0]]


def test_remove_small_segments_drops_empty_paths():
    """Empty paths disappear."""
    assert remove_small_segments([[], [[0, 0], [5, 0]]], 2.0) == [[[0, 0], [5, 0]]]


def test_remove_small_segments_keeps_closure():
    """A closed path whose closing point was dropped is closed again."""
    path = [[0, 0], [10, 0], [10, 10], [0, 10], [0, 3], [0, 1.5]]
    result = remove_small_segments([path], min_length=2.0)[0]
    assert result[0] == [0, 0]
    assert result[-1] == [0, 0]


def test_equalize_direction_ccw():
    """A clockwise loop comes out counter-clockwise with the same start point."""
    cw = [[0, 0], [0, 10], [10, 10], [10, 0], [0, 0]]
    assert signed_area(cw) < 0

    result = equalize_path_direction([cw], "ccw")[0]
    assert signed_area(result) > 0
    assert result[0] == cw[0]


def test_equalize_direction_reverses_after_first_point():
    """Only the first point stays put; the rest of a near-closed loop is reversed."""
    cw = [[0, 0], [0, 10], [10, 10], [10, 0], [0.5, 0]]
    result = equalize_path_direction([cw], "ccw")[0]
    assert result == [[0, 0], [0.5, 0], [10, 0], [10, 10], [0, 10]]


def test_equalize_direction_cw():
    """The target direction can be clockwise."""
    ccw = [[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]]
    result = equalize_path_direction([ccw], "cw")[0]
    assert signed_area(result) < 0


def test_equalize_direction_leaves_open_paths():
    """Open paths have no winding and are not reversed."""
    open_path = [[0, 0], [0, 10], [10, 10]]
    assert equalize_path_direction([open_path], "ccw")[0] == open_path


def test_smooth_paths_zero_smoothness_is_identity():
    """Smoothness 0 leaves paths unchanged."""
    paths = [NOISY_LINE]
    assert smooth_paths(paths, smoothness=0.0) is paths


def test_smooth_paths_keeps_point_count():
    """Smoothing moves points but never adds or removes them."""
    result = smooth_paths([NOISY_LINE], smoothness=0.5, window_size=3)[0]
    assert len(result) == len(NOISY_LINE)
    # the spike is pulled towards its neighbours
    assert result[5][1] < 25


def test_simplify_with_dict_options():
    """Options may be given as a plain dict."""
    result = simplify([NOISY_LINE], {"douglas_peucker_tolerance": 1.0, "min_segment_length": 0.0})
    assert result[0] == [[0, 0], [40, 0], [50, 25], [60, 0]]


def test_simplify_stage_toggles():
    """Disabled stages do not run."""
    options = SimplifyOptions(
        apply_douglas_peucker=False,
        remove_small_segments=False,
        equalize_direction=False,
    )
    assert simplify([NOISY_LINE], options) == [NOISY_LINE]


def test_simplify_raw_paths_keeps_closure():
    """Closed raw paths keep their flag and stay counter-clockwise."""
    raw = [RawPath(points=[(0, 0), (0, 3000), (4000, 3000), (4000, 0)], closed=True)]
    result = simplify_raw_paths(raw)

    assert len(result) == 1
    assert result[0].closed
    assert result[0].points[0] == result[0].points[-1]
    assert signed_area(result[0].points) > 0
    assert result[0].points == [(0, 0), (4000, 0), (4000, 3000), (0, 3000), (0, 0)]


def test_simplify_raw_paths_accepts_dicts():
    """Dict raw paths are read like RawPath models."""
    result = simplify_raw_paths([{"points": NOISY_LINE, "closed": False}])
    assert isinstance(result[0], RawPath)
    assert not result[0].closed
    assert result[0].points[0] == (0, 0)
    assert result[0].points[-1] == (60, 0)
