"""Map saved days onto trend chart coordinates."""

from dataclasses import dataclass

from calorie_tracker.domain.chart import ChartPoint, CurveSegment, TrendChart
from calorie_tracker.domain.records import DailyRecord

HEADROOM = 1.15


@dataclass
class TrendChartMapper:
    """Scale intake history into a plot area and smooth it with a spline."""

    width: float = 600.0
    height: float = 200.0

    def map(self, records: list[DailyRecord], tdee: float) -> TrendChart | None:
        """Return the chart for records ordered oldest first, or None without data."""
        if not records:
            return None
        max_value = max(max(record.calories_intake for record in records), tdee)
        max_value *= HEADROOM
        points = [
            ChartPoint(
                x=self._x(index, len(records)),
                y=self._y(record.calories_intake, max_value),
                date=record.date,
                calories=record.calories_intake,
            )
            for index, record in enumerate(records)
        ]
        return TrendChart(
            width=self.width,
            height=self.height,
            max_value=max_value,
            tdee_y=self._y(tdee, max_value),
            points=points,
            segments=catmull_rom_segments([(point.x, point.y) for point in points]),
        )

    def _x(self, index: int, count: int) -> float:
        if count == 1:
            return self.width / 2
        return index * self.width / (count - 1)

    def _y(self, value: float, max_value: float) -> float:
        if max_value <= 0:
            return self.height
        return self.height - (value / max_value) * self.height


def catmull_rom_segments(
    points: list[tuple[float, float]],
) -> list[CurveSegment]:
    """Return Bezier segments passing through every point.

    Endpoints reuse themselves as the missing neighbour.
    """
    segments: list[CurveSegment] = []
    for index in range(len(points) - 1):
        p0 = points[index - 1] if index > 0 else points[index]
        p1 = points[index]
        p2 = points[index + 1]
        p3 = points[index + 2] if index + 2 < len(points) else p2
        segments.append(
            CurveSegment(
                start=p1,
                control1=(p1[0] + (p2[0] - p0[0]) / 6, p1[1] + (p2[1] - p0[1]) / 6),
                control2=(p2[0] - (p3[0] - p1[0]) / 6, p2[1] - (p3[1] - p1[1]) / 6),
                end=p2,
            )
        )
    return segments
