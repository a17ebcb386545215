"""
Camera Utilities Module
Opens a webcam that actually delivers frames, probing backends and indices
"""

import logging
import time

import cv2

from mouth_breathing.config import (
    CAMERA_INDEX,
    CAMERA_BACKEND,
    CAMERA_PROBE_COUNT,
    FRAME_WIDTH,
    FRAME_HEIGHT,
    TARGET_FPS
)

logger = logging.getLogger(__name__)

WARMUP_READS = 10


def backend_candidates(backend=CAMERA_BACKEND):
    """
    List the capture backends to try, in order.

    Args:
        backend: "AUTO", "DSHOW" or "MSMF"

    Returns:
        List of cv2 backend constants; None stands for OpenCV's default
    """
    backend = str(backend).upper()
    if backend == "DSHOW" and hasattr(cv2, "CAP_DSHOW"):
        return [cv2.CAP_DSHOW]
    if backend == "MSMF" and hasattr(cv2, "CAP_MSMF"):
        return [cv2.CAP_MSMF]

    candidates = [getattr(cv2, name) for name in ("CAP_DSHOW", "CAP_MSMF") if hasattr(cv2, name)]
    candidates.append(None)
    return candidates


def probe_order(preferred_index, probe_count=CAMERA_PROBE_COUNT):
    """Preferred index first, then the remaining indices 0..probe_count-1."""
    return [preferred_index] + [i for i in range(probe_count) if i != preferred_index]


def _warm_up(cap):
    for _ in range(WARMUP_READS):
        ret, _frame = cap.read()
        if ret:
            return True
        time.sleep(0.05)
    return False


def open_camera(index=CAMERA_INDEX, width=FRAME_WIDTH, height=FRAME_HEIGHT,
                fps=TARGET_FPS, backend=CAMERA_BACKEND):
    """
    Open a working camera capture device.

    Args:
        index: Preferred camera index
        width: Requested frame width
        height: Requested frame height
        fps: Requested frame rate
        backend: Backend preference ("AUTO", "DSHOW", "MSMF")

    Returns:
        cv2.VideoCapture object

    Raises:
        RuntimeError: If no camera can be opened
    """
    indices = probe_order(index)
    backends = backend_candidates(backend)

    last_error = None
    for api in backends:
        for idx in indices:
            try:
                cap = cv2.VideoCapture(idx, api) if api is not None else cv2.VideoCapture(idx)
            except cv2.error as e:
                last_error = e
                continue

            if not cap.isOpened():
                cap.release()
                continue

            # Drivers may ignore these
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
            cap.set(cv2.CAP_PROP_FPS, fps)

            if _warm_up(cap):
                logger.info("Camera opened: index=%s, backend=%s", idx, "DEFAULT" if api is None else api)
                return cap

            cap.release()

    msg = (
        f"Could not read frames from any camera.\n"
        f"Tried indices: {indices}\n"
        f"Tried backends: {['DEFAULT' if b is None else b for b in backends]}\n"
        f"Tips:\n"
        f"- Close other apps using the camera (Teams/Zoom/Browser).\n"
        f"- Pass a different index with --camera.\n"
        f"- On Windows, set CAMERA_BACKEND to 'DSHOW' or 'MSMF'.\n"
    )
    if last_error:
        msg += f"Last error: {last_error}\n"
    raise RuntimeError(msg)
