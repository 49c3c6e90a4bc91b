"""Configuration models and defaults for the time logger."""

from __future__ import annotations

from dataclasses import dataclass, field


PIE_COLORS: tuple[str, ...] = (
    "#7398E6",
    "#5CB978",
    "#F59E0B",
    "#EF4444",
    "#A78BFA",
    "#14B8A6",
)
BAR_COLORS: tuple[str, ...] = ("#3B82F6",)
FALLBACK_COLOR = "#7398E6"

DEFAULT_TASK_OPTIONS: tuple[str, ...] = (
    "Tickets",
    "Meeting",
    "Power BI",
    "QA Testing",
    "Knowledge Base Development",
    "Other",
)


@dataclass(frozen=True, slots=True)
class PieGeometry:
    """Circle used when laying out pie slices."""

    center: float = 105.0
    radius: float = 105.0

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise ValueError("radius must be positive")


@dataclass(slots=True)
class AnalysisSettings:
    """Palettes and geometry for the analysis dashboard."""

    pie_palette: tuple[str, ...] = PIE_COLORS
    bar_palette: tuple[str, ...] = BAR_COLORS
    geometry: PieGeometry = field(default_factory=PieGeometry)
    lookback_years: int = 2

    @classmethod
    def from_options(
        cls,
        pie_palette: list[str] | None = None,
        bar_palette: list[str] | None = None,
        radius: float | None = None,
    ) -> "AnalysisSettings":
        geometry = PieGeometry(center=radius, radius=radius) if radius else PieGeometry()
        return cls(
            pie_palette=tuple(pie_palette) if pie_palette else PIE_COLORS,
            bar_palette=tuple(bar_palette) if bar_palette else BAR_COLORS,
            geometry=geometry,
        )
