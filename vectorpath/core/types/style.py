# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Stroke style value types."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import DEFAULT_MITER_LIMIT, Arrowhead, LineCap, LineJoin


@dataclass(frozen=True)
class DashPattern:
    """On/off lengths starting with "on", shifted by *phase* along the path."""

    lengths: tuple[float, ...]
    phase: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "lengths", tuple(float(v) for v in self.lengths))
        if any(v < 0 for v in self.lengths):
            raise ValueError(f"Dash lengths must not be negative: {self.lengths}")

    @property
    def is_solid(self) -> bool:
        return not self.lengths or sum(self.lengths) <= 0.0

    @property
    def period(self) -> float:
        # Odd-length patterns are conceptually doubled ([d] == [d, d])
        total = sum(self.lengths)
        if len(self.lengths) % 2 == 1:
            total *= 2
        return total


@dataclass(frozen=True)
class StrokeStyle:
    width: float = 1.0
    cap: LineCap = LineCap.BUTT
    join: LineJoin = LineJoin.MITER
    miter_limit: float = DEFAULT_MITER_LIMIT
    dash: DashPattern | None = None
    start_arrowhead: Arrowhead = Arrowhead.NONE
    end_arrowhead: Arrowhead = Arrowhead.NONE
    arrowhead_scale: float = 3.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "cap", LineCap(self.cap))
        object.__setattr__(self, "join", LineJoin(self.join))
        object.__setattr__(self, "start_arrowhead", Arrowhead(self.start_arrowhead))
        object.__setattr__(self, "end_arrowhead", Arrowhead(self.end_arrowhead))

    @property
    def half_width(self) -> float:
        return self.width / 2.0

    @property
    def has_arrowheads(self) -> bool:
        return self.start_arrowhead != Arrowhead.NONE or self.end_arrowhead != Arrowhead.NONE

    @property
    def is_dashed(self) -> bool:
        return self.dash is not None and not self.dash.is_solid
