"""
Face Detection Module
MediaPipe Face Mesh detection and landmark extraction
"""

import cv2
import mediapipe as mp

from mouth_breathing.config import (
    UPPER_LIP_BOTTOM_INDEX,
    LOWER_LIP_TOP_INDEX,
    FOREHEAD_INDEX,
    CHIN_INDEX
)
from mouth_breathing.geometry import Point3D


class FaceDetector:
    """
    MediaPipe Face Mesh detector producing one LandmarkFrame per image.
    """

    # Reference points used by the mouth open ratio
    # Order: upper lip bottom, lower lip top, forehead, chin
    REFERENCE_INDICES = [UPPER_LIP_BOTTOM_INDEX, LOWER_LIP_TOP_INDEX, FOREHEAD_INDEX, CHIN_INDEX]

    def __init__(self, min_detection_confidence=0.5, min_tracking_confidence=0.5):
        """
        Initialize face detector.

        Args:
            min_detection_confidence: MediaPipe detection confidence
            min_tracking_confidence: MediaPipe tracking confidence
        """
        self.face_mesh = mp.solutions.face_mesh.FaceMesh(
            static_image_mode=False,
            max_num_faces=1,
            refine_landmarks=True,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

    def detect(self, frame):
        """
        Detect face landmarks from frame.

        Args:
            frame: BGR image frame

        Returns:
            List of Point3D in normalized coordinates, or None if no face detected
        """
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        results = self.face_mesh.process(rgb)

        if not results.multi_face_landmarks:
            return None

        return to_landmark_frame(results.multi_face_landmarks[0])

    def get_reference_points(self, landmarks, frame_shape):
        """
        Get pixel coordinates of the ratio reference points for drawing.

        Args:
            landmarks: LandmarkFrame returned by detect()
            frame_shape: Shape of frame (H, W, C)

        Returns:
            List of (x, y) tuples, empty if landmarks are incomplete
        """
        h, w = frame_shape[:2]
        if not landmarks or len(landmarks) <= max(self.REFERENCE_INDICES):
            return []
        return [
            (int(landmarks[idx].x * w), int(landmarks[idx].y * h))
            for idx in self.REFERENCE_INDICES
        ]

    def close(self):
        self.face_mesh.close()


def to_landmark_frame(face_landmarks):
    """
    Convert a MediaPipe NormalizedLandmarkList into a list of Point3D.

    Args:
        face_landmarks: MediaPipe face landmarks object

    Returns:
        List of Point3D
    """
    return [Point3D(lm.x, lm.y, lm.z) for lm in face_landmarks.landmark]
