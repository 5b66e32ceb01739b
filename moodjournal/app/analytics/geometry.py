"""Pie chart geometry: proportional arcs and the inverse tap lookup.

Angles follow the canvas convention: ``0`` points along the positive x axis
and angles grow towards the positive y axis. Rendering is left to the
caller; nothing here touches a drawing surface.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class Arc:
    mood: str
    start: float
    end: float
    count: int

    @property
    def span(self) -> float:
        return self.end - self.start

    @property
    def midpoint(self) -> float:
        return (self.start + self.end) / 2


@dataclass(frozen=True)
class ChartGeometry:
    center_x: float
    center_y: float
    radius: float
    active_ratio: float = 1.0

    @classmethod
    def for_canvas(
        cls,
        width: float,
        height: float,
        *,
        active_ratio: float = 1.0,
    ) -> ChartGeometry:
        return cls(
            center_x=width / 2,
            center_y=height / 2,
            radius=min(width, height) / 3,
            active_ratio=active_ratio,
        )

    @property
    def hit_radius(self) -> float:
        return self.radius * self.active_ratio

    def point_at(self, angle: float, distance: float) -> tuple[float, float]:
        return (
            self.center_x + math.cos(angle) * distance,
            self.center_y + math.sin(angle) * distance,
        )


def _ordered_moods(pie_map: Mapping[str, int], palette: Sequence[str]) -> list[str]:
    ordered = [mood for mood in dict.fromkeys(palette) if mood in pie_map]
    seen = set(ordered)
    for mood in pie_map:
        if mood not in seen:
            ordered.append(mood)
            seen.add(mood)
    return ordered


def build_arcs(pie_map: Mapping[str, int], palette: Sequence[str]) -> list[Arc]:
    counts = {mood: count for mood, count in pie_map.items() if mood and count > 0}
    total = sum(counts.values())
    if total <= 0:
        return []

    arcs: list[Arc] = []
    moods = _ordered_moods(counts, palette)
    angle = 0.0
    for index, mood in enumerate(moods):
        count = counts[mood]
        if index == len(moods) - 1:
            end = math.tau
        else:
            end = angle + math.tau * count / total
        arcs.append(Arc(mood=mood, start=angle, end=end, count=count))
        angle = end
    return arcs


def normalize_angle(angle: float) -> float:
    normalized = angle % math.tau
    # tiny negative angles round up to tau
    if normalized >= math.tau:
        return 0.0
    return normalized


def resolve_tap(
    point: tuple[float, float],
    arcs: Sequence[Arc],
    geometry: ChartGeometry,
) -> str | None:
    dx = point[0] - geometry.center_x
    dy = point[1] - geometry.center_y
    if math.hypot(dx, dy) > geometry.hit_radius:
        return None
    angle = normalize_angle(math.atan2(dy, dx))
    for arc in arcs:
        if arc.start <= angle < arc.end:
            return arc.mood
    return None


__all__ = ["Arc", "ChartGeometry", "build_arcs", "normalize_angle", "resolve_tap"]
