# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Engine configuration.

EngineConfig gathers the numeric policy the algorithms need (tolerances,
subdivision ceilings, epsilons, output precision). Operations take an
optional ``config`` argument and fall back to DEFAULT_CONFIG, so a caller
that never thinks about configuration gets the same results as the CLI with
no flags.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class EngineConfig:
    # Flattening tolerance used when a caller does not supply one
    default_flatness: float = 0.1

    # Curve fitting
    fit_max_depth: int = 256
    fit_max_segments: int = 20000
    fit_reparameterize_steps: int = 4
    fit_corner_angle: float = math.radians(60.0)
    close_snap_distance: float = 0.0

    # Stroke outlining: flatness = clamp(width * ratio, min, max)
    stroke_flatness_ratio: float = 0.01
    stroke_min_flatness: float = 0.01
    stroke_max_flatness: float = 0.5

    # Boolean erase
    erase_flatness: float = 0.1
    intersection_epsilon: float = 1e-7

    # Path data serialization
    path_data_precision: int = 3

    # Replaces the default "can this shape be outlined" test when set.
    # Called as predicate(shape, style) -> bool.
    outline_predicate: Optional[Callable] = None

    def __post_init__(self) -> None:
        if self.default_flatness < 0 or self.erase_flatness <= 0:
            raise ValueError("Flatness tolerances must be positive")
        if self.fit_max_depth < 1 or self.fit_max_segments < 1:
            raise ValueError("Curve fitting ceilings must be at least 1")
        if self.stroke_min_flatness <= 0 or self.stroke_max_flatness < self.stroke_min_flatness:
            raise ValueError("Invalid stroke flatness range")
        if self.path_data_precision < 0:
            raise ValueError("path_data_precision must not be negative")

    def replace(self, **changes) -> EngineConfig:
        return dataclasses.replace(self, **changes)

    def stroke_flatness(self, width: float) -> float:
        """Flattening tolerance for a stroke; thinner strokes flatten tighter."""
        return max(self.stroke_min_flatness,
                   min(self.stroke_max_flatness, width * self.stroke_flatness_ratio))


DEFAULT_CONFIG = EngineConfig()


def resolve(config: EngineConfig | None) -> EngineConfig:
    return DEFAULT_CONFIG if config is None else config
