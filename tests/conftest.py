"""
Shared fixtures for the mouth breathing detector tests.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Project root
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from mouth_breathing.geometry import Point3D

N_LANDMARKS = 478


def build_face(mouth_gap: float = 0.0, face_span: float = 1.0,
               scale: float = 1.0, offset: tuple = (0.0, 0.0, 0.0)) -> list:
    """Create a 478-point LandmarkFrame with a chosen lip gap and face span.

    Forehead (10) sits at y=0, chin (152) at y=face_span, upper lip (13) at
    y=face_span/2 and lower lip (14) mouth_gap below it. Everything is then
    scaled and shifted, which leaves the ratio unchanged.
    """
    ox, oy, oz = offset

    def pt(x, y, z=0.0):
        return Point3D(x * scale + ox, y * scale + oy, z * scale + oz)

    frame = [pt(0.5, 0.5) for _ in range(N_LANDMARKS)]
    frame[10] = pt(0.5, 0.0)
    frame[152] = pt(0.5, face_span)
    frame[13] = pt(0.5, face_span / 2)
    frame[14] = pt(0.5, face_span / 2 + mouth_gap)
    return frame


@pytest.fixture
def make_face():
    return build_face
