"""
Mouth Geometry Module
Calculates the mouth open ratio from face landmarks and classifies open/closed
"""

from typing import NamedTuple

import numpy as np

from mouth_breathing.config import (
    MOUTH_OPEN_THRESHOLD,
    UPPER_LIP_BOTTOM_INDEX,
    LOWER_LIP_TOP_INDEX,
    FOREHEAD_INDEX,
    CHIN_INDEX
)


class Point3D(NamedTuple):
    """Single landmark in the detector's normalized coordinate space."""
    x: float
    y: float
    z: float


def _as_array(point):
    return np.array([point.x, point.y, point.z], dtype=np.float64)


def calculate_distance(p1, p2):
    """
    Calculate the Euclidean distance between two 3D points.

    Args:
        p1: Point with x, y, z attributes
        p2: Point with x, y, z attributes

    Returns:
        Distance (float)
    """
    return float(np.linalg.norm(_as_array(p1) - _as_array(p2)))


def _landmark_at(landmarks, idx):
    if idx >= len(landmarks):
        return None
    return landmarks[idx]


def extract_mouth_landmarks(landmarks):
    """
    Resolve the four reference points used for the mouth open ratio.

    Uses MediaPipe Face Mesh landmarks:
    - 13: upper lip bottom
    - 14: lower lip top
    - 10: top of forehead
    - 152: chin

    Args:
        landmarks: Indexable sequence of points (LandmarkFrame) or None

    Returns:
        Tuple (upper_lip_bottom, lower_lip_top, forehead, chin) or None if any is missing
    """
    if landmarks is None:
        return None

    points = tuple(
        _landmark_at(landmarks, idx)
        for idx in (UPPER_LIP_BOTTOM_INDEX, LOWER_LIP_TOP_INDEX, FOREHEAD_INDEX, CHIN_INDEX)
    )
    if any(p is None for p in points):
        return None
    return points


def calculate_mouth_ratio(landmarks):
    """
    Calculate the mouth open ratio.

    ratio = (distance between lips) / (distance forehead to chin)

    Normalizing by face height keeps the ratio stable as the face moves
    closer to or further from the camera.

    Args:
        landmarks: Indexable sequence of points (LandmarkFrame) or None

    Returns:
        Ratio (float) or None if landmarks are missing or face height is zero
    """
    points = extract_mouth_landmarks(landmarks)
    if points is None:
        return None

    upper_lip_bottom, lower_lip_top, forehead, chin = points
    mouth_gap = calculate_distance(upper_lip_bottom, lower_lip_top)
    face_span = calculate_distance(forehead, chin)

    if face_span == 0:
        return None

    return mouth_gap / face_span


def classify_mouth(landmarks, threshold=MOUTH_OPEN_THRESHOLD):
    """
    Calculate the mouth open ratio and classify it against the threshold.

    The mouth counts as open only when the ratio is strictly greater than
    the threshold. Incomplete or degenerate frames are reported as closed.

    Args:
        landmarks: Indexable sequence of points (LandmarkFrame) or None
        threshold: Ratio above which the mouth counts as open

    Returns:
        Tuple (ratio or None, is_open)
    """
    ratio = calculate_mouth_ratio(landmarks)
    if ratio is None:
        return None, False
    return ratio, ratio > threshold


def is_mouth_open(landmarks, threshold=MOUTH_OPEN_THRESHOLD):
    """Determine whether the mouth is open (True = open)."""
    return classify_mouth(landmarks, threshold)[1]
