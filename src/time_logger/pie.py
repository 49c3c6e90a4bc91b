"""Lay out activity buckets as SVG pie-chart wedges.

Angles are in degrees using screen coordinates: 0 points along +x and
angles grow clockwise because y grows downward. The first wedge starts at
12 o'clock (-90).
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from .config import PieGeometry
from .models import ActivityBucket, PieSlice

START_ANGLE = -90.0
MIN_SWEEP = 0.01
FULL_CIRCLE_SWEEP = 359.99


def build_slices(
    buckets: Sequence[ActivityBucket], geometry: PieGeometry | None = None
) -> list[PieSlice]:
    geometry = geometry or PieGeometry()
    slices: list[PieSlice] = []
    start_angle = START_ANGLE
    last_index = len(buckets) - 1

    for index, bucket in enumerate(buckets):
        if index == last_index:
            # The last wedge absorbs accumulated drift so the circle closes.
            requested = 360.0 - (start_angle - START_ANGLE)
        else:
            requested = 360.0 * bucket.percentage / 100.0
        sweep = min(max(requested, 0.0), 360.0)

        if sweep >= MIN_SWEEP:
            full_circle = sweep >= FULL_CIRCLE_SWEEP
            path = (
                full_circle_path(geometry)
                if full_circle
                else wedge_path(start_angle, sweep, geometry)
            )
            slices.append(
                PieSlice(
                    color_hex=bucket.color_hex,
                    start_angle=start_angle,
                    sweep_angle=sweep,
                    large_arc=full_circle or sweep > 180.0,
                    full_circle=full_circle,
                    path_data=path,
                )
            )

        start_angle += sweep

    return slices


def wedge_path(start_angle: float, sweep_angle: float, geometry: PieGeometry) -> str:
    center = geometry.center
    radius = geometry.radius
    start_x, start_y = point_on_circle(start_angle, geometry)
    end_x, end_y = point_on_circle(start_angle + sweep_angle, geometry)
    large_arc = 1 if sweep_angle > 180.0 else 0
    return (
        f"M {_num(center)},{_num(center)} "
        f"L {_num(start_x)},{_num(start_y)} "
        f"A {_num(radius)},{_num(radius)} 0 {large_arc} 1 {_num(end_x)},{_num(end_y)} Z"
    )


def full_circle_path(geometry: PieGeometry) -> str:
    """Two half-turn arcs; a single arc cannot end where it starts."""
    center = _num(geometry.center)
    radius = _num(geometry.radius)
    top = _num(geometry.center - geometry.radius)
    bottom = _num(geometry.center + geometry.radius)
    return (
        f"M {center},{center} L {center},{top} "
        f"A {radius},{radius} 0 1 1 {center},{bottom} "
        f"A {radius},{radius} 0 1 1 {center},{top} Z"
    )


def point_on_circle(angle: float, geometry: PieGeometry) -> tuple[float, float]:
    radians = math.radians(angle)
    return (
        geometry.center + geometry.radius * math.cos(radians),
        geometry.center + geometry.radius * math.sin(radians),
    )


def render_svg(slices: Iterable[PieSlice], geometry: PieGeometry | None = None) -> str:
    geometry = geometry or PieGeometry()
    size = _num(geometry.center + geometry.radius)
    paths = "".join(
        f'<path d="{item.path_data}" fill="{item.color_hex}"/>' for item in slices
    )
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" '
        f'viewBox="0 0 {size} {size}">{paths}</svg>'
    )


def _num(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text
