import pytest

from time_logger.breakdown import aggregate
from time_logger.config import PIE_COLORS, PieGeometry
from time_logger.models import ActivityBucket
from time_logger.pie import build_slices, full_circle_path, render_svg

from conftest import make_entry

FULL_CIRCLE = "M 105,105 L 105,0 A 105,105 0 1 1 105,210 A 105,105 0 1 1 105,0 Z"


def bucket(name: str, percentage: float, color: str = "#000000") -> ActivityBucket:
    return ActivityBucket(name=name, color_hex=color, minutes=1, percentage=percentage)


def test_empty_input_yields_no_slices():
    assert build_slices([]) == []


def test_single_bucket_is_a_full_circle():
    slices = build_slices([bucket("a", 100.0, "#7398E6")])

    assert len(slices) == 1
    assert slices[0].full_circle
    assert slices[0].sweep_angle == 360.0
    assert slices[0].path_data == FULL_CIRCLE
    assert slices[0].color_hex == "#7398E6"


def test_two_halves_start_at_twelve_o_clock():
    first, second = build_slices([bucket("a", 50.0), bucket("b", 50.0)])

    assert first.start_angle == -90.0
    assert first.sweep_angle == 180.0
    assert not first.large_arc
    assert first.path_data == "M 105,105 L 105,0 A 105,105 0 0 1 105,210 Z"
    assert second.start_angle == 90.0
    assert second.sweep_angle == 180.0
    assert second.path_data == "M 105,105 L 105,210 A 105,105 0 0 1 105,0 Z"


def test_large_arc_flag_set_above_half_circle():
    big, small = build_slices([bucket("a", 75.0), bucket("b", 25.0)])

    assert big.large_arc
    assert big.path_data == "M 105,105 L 105,0 A 105,105 0 1 1 0,105 Z"
    assert not small.large_arc
    assert small.path_data == "M 105,105 L 0,105 A 105,105 0 0 1 105,0 Z"


def test_quarter_wedge_coordinates():
    first = build_slices([bucket("a", 25.0), bucket("b", 75.0)])[0]
    assert first.path_data == "M 105,105 L 105,0 A 105,105 0 0 1 210,105 Z"


def test_coordinates_use_at_most_three_decimals():
    first = build_slices([bucket("a", 100 / 3), bucket("b", 100 / 3), bucket("c", 100 / 3)])[0]
    assert first.path_data.endswith("195.933,157.5 Z")


def test_last_slice_closes_the_circle():
    slices = build_slices([bucket("a", 100 / 3), bucket("b", 100 / 3), bucket("c", 100 / 3)])

    assert sum(item.sweep_angle for item in slices) == pytest.approx(360.0)
    assert slices[-1].end_angle == pytest.approx(270.0)


def test_negligible_slice_is_skipped_but_advances_the_cursor():
    tiny = 0.005 * 100 / 360
    slices = build_slices(
        [bucket("a", 50.0, "#a"), bucket("tiny", tiny, "#t"), bucket("c", 50.0 - tiny, "#c")]
    )

    assert [item.color_hex for item in slices] == ["#a", "#c"]
    assert slices[1].start_angle == pytest.approx(90.005)
    assert slices[1].end_angle == pytest.approx(270.0)


def test_negligible_last_slice_is_dropped():
    slices = build_slices([bucket("a", 99.999), bucket("b", 0.001)])

    assert len(slices) == 1
    assert slices[0].full_circle


def test_overfull_percentages_clamp_the_last_slice():
    slices = build_slices([bucket("a", 80.0), bucket("b", 80.0), bucket("c", 10.0)])
    assert [item.sweep_angle for item in slices] == pytest.approx([288.0, 288.0])


def test_custom_geometry():
    geometry = PieGeometry(center=50.5, radius=50.5)
    assert full_circle_path(geometry) == (
        "M 50.5,50.5 L 50.5,0 A 50.5,50.5 0 1 1 50.5,101 A 50.5,50.5 0 1 1 50.5,0 Z"
    )


def test_slices_follow_aggregated_order_and_colors():
    buckets = aggregate(
        [make_entry("A", 60), make_entry("B", 30), make_entry("", 30)], PIE_COLORS
    )
    slices = build_slices(buckets)

    assert [item.color_hex for item in slices] == [b.color_hex for b in buckets]
    assert [item.sweep_angle for item in slices] == pytest.approx([180.0, 90.0, 90.0])
    assert sum(item.sweep_angle for item in slices) == pytest.approx(360.0)


def test_render_svg_wraps_paths():
    svg = render_svg(build_slices([bucket("a", 100.0, "#7398E6")]))

    assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="210" height="210"')
    assert f'<path d="{FULL_CIRCLE}" fill="#7398E6"/>' in svg
