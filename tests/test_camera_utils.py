"""
Camera opener tests (cv2.VideoCapture mocked).
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from mouth_breathing import camera_utils
from mouth_breathing.camera_utils import backend_candidates, open_camera, probe_order


def _capture(opened=True, reads=None):
    cap = MagicMock()
    cap.isOpened.return_value = opened
    frame = np.zeros((480, 640, 3), dtype=np.uint8)
    cap.read.side_effect = [(ok, frame if ok else None) for ok in (reads or [True])]
    return cap


def test_probe_order_puts_preferred_first():
    assert probe_order(2, probe_count=4) == [2, 0, 1, 3]
    assert probe_order(0, probe_count=3) == [0, 1, 2]


def test_auto_backend_always_ends_with_default():
    assert backend_candidates("AUTO")[-1] is None


def test_returns_first_camera_that_delivers_frames():
    dead = _capture(opened=False)
    good = _capture(reads=[False, True])
    with patch.object(camera_utils, "backend_candidates", return_value=[None]), \
            patch.object(camera_utils.cv2, "VideoCapture", side_effect=[dead, good]) as video_capture, \
            patch.object(camera_utils.time, "sleep"):
        cap = open_camera(index=1)

    assert cap is good
    assert [c.args for c in video_capture.call_args_list] == [(1,), (0,)]
    dead.release.assert_called_once()
    good.release.assert_not_called()


def test_raises_when_nothing_works():
    with patch.object(camera_utils, "backend_candidates", return_value=[None]), \
            patch.object(camera_utils.cv2, "VideoCapture", side_effect=lambda idx: _capture(opened=False)), \
            patch.object(camera_utils.time, "sleep"):
        with pytest.raises(RuntimeError, match="Could not read frames"):
            open_camera(index=0)
