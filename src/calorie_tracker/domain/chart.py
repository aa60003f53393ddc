"""Domain models for trend chart coordinates."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ChartPoint:
    """Plot coordinates of one saved day."""

    x: float
    y: float
    date: str
    calories: int


@dataclass(frozen=True)
class CurveSegment:
    """Cubic Bezier segment between two consecutive points."""

    start: tuple[float, float]
    control1: tuple[float, float]
    control2: tuple[float, float]
    end: tuple[float, float]


@dataclass(frozen=True)
class TrendChart:
    """Normalized chart for a window of saved days."""

    width: float
    height: float
    max_value: float
    tdee_y: float
    points: list[ChartPoint]
    segments: list[CurveSegment]

    def line_path(self) -> str:
        """Return an SVG path through every point."""
        first = self.points[0]
        parts = [f"M {_fmt(first.x)} {_fmt(first.y)}"]
        for segment in self.segments:
            parts.append(
                "C "
                f"{_fmt(segment.control1[0])} {_fmt(segment.control1[1])}, "
                f"{_fmt(segment.control2[0])} {_fmt(segment.control2[1])}, "
                f"{_fmt(segment.end[0])} {_fmt(segment.end[1])}"
            )
        return " ".join(parts)

    def area_path(self) -> str:
        """Return the curve closed along the baseline for fill rendering."""
        first = self.points[0]
        last = self.points[-1]
        return (
            f"{self.line_path()} "
            f"L {_fmt(last.x)} {_fmt(self.height)} "
            f"L {_fmt(first.x)} {_fmt(self.height)} Z"
        )


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")
