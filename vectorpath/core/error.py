# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Engine error types.

Every failure the engine reports is local and synchronous: the operation
raises one of these to its immediate caller and leaves its inputs untouched.
Each class also derives from the closest builtin so callers that only know
about ``ValueError`` / ``RuntimeError`` keep working.

Geometric near-degeneracies (tiny edges, near-tangent contacts) are resolved
by epsilon policy inside the algorithms and never surface here.
"""

from __future__ import annotations


class PathEngineError(Exception):
    """Base class for all engine failures."""


class DegenerateInputError(PathEngineError, ValueError):
    """Too few distinct points, an empty subpath, or a meaningless tolerance."""


class FitConvergenceError(PathEngineError, RuntimeError):
    """Curve fitting hit its subdivision ceiling."""

    def __init__(self, message: str, depth: int = 0, segments: int = 0) -> None:
        super().__init__(message)
        self.depth = depth
        self.segments = segments


class DiscontinuousSegmentError(PathEngineError, ValueError):
    """A segment does not start where the previous one ended."""


class NotOutlinableError(PathEngineError, ValueError):
    """The stroke style or the path cannot produce an outline."""


class InvalidFillRuleCombination(PathEngineError, ValueError):
    """Reserved for boolean operations between incompatible fill rules.

    ``erase`` always normalizes its output to the non-zero rule, so nothing
    raises this today.
    """


class PathDataError(PathEngineError, ValueError):
    """Path data text could not be parsed."""
