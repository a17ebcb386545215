"""
Visualization Module
Draws mouth state, ratio and current settings on the video frame
"""

import cv2

STATE_OPEN_COLOR = (68, 68, 239)      # Red (BGR)
STATE_CLOSED_COLOR = (153, 211, 52)   # Emerald (BGR)
NO_FACE_COLOR = (200, 200, 200)
TEXT_COLOR = (255, 255, 255)
PANEL_COLOR = (0, 0, 0)


def state_label(committed_state):
    """Return (headline, caption) for the committed state."""
    if committed_state:
        return "OPEN", "Mouth breathing detected"
    return "CLOSED", "Nose breathing detected"


def draw_reference_points(frame, points, color=(255, 255, 0), radius=3):
    """
    Draw the ratio reference points (lips, forehead, chin) on the frame.

    Args:
        frame: BGR image frame
        points: List of (x, y) pixel tuples
        color: BGR color tuple
        radius: Circle radius
    """
    if len(points) == 4:
        cv2.line(frame, points[2], points[3], (128, 128, 128), 1)
        cv2.line(frame, points[0], points[1], color, 1)
    for pt in points:
        cv2.circle(frame, pt, radius, color, -1)


def draw_overlay(
    frame,
    committed_state,
    ratio=None,
    config=None,
    face_present=True,
    pending_duration=0.0,
    cooldown_remaining=0.0,
):
    """
    Draw state and settings information on the frame.

    Args:
        frame: BGR image frame
        committed_state: Debounced mouth state (True = open)
        ratio: Current mouth open ratio (None if unavailable)
        config: DetectorConfig shown in the settings block (optional)
        face_present: False when no face was found this frame
        pending_duration: Seconds a pending state change has persisted
        cooldown_remaining: Seconds until the next chime may play
    """
    h, w = frame.shape[:2]
    color = STATE_OPEN_COLOR if committed_state else STATE_CLOSED_COLOR
    headline, caption = state_label(committed_state)

    # Status border
    cv2.rectangle(frame, (0, 0), (w - 1, h - 1), color, 4)

    cv2.putText(frame, headline, (10, 40), cv2.FONT_HERSHEY_SIMPLEX, 1.2, color, 3)
    cv2.putText(frame, caption, (10, 70), cv2.FONT_HERSHEY_SIMPLEX, 0.6, color, 2)

    if not face_present:
        cv2.putText(frame, "NO FACE", (10, 100), cv2.FONT_HERSHEY_SIMPLEX, 0.6, NO_FACE_COLOR, 2)
    elif ratio is not None:
        cv2.putText(frame, f"Ratio: {ratio:.3f}", (10, 100),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, TEXT_COLOR, 1)

    if config is not None:
        if pending_duration > 0 and config.delay_seconds > 0:
            cv2.putText(
                frame,
                f"Pending: {pending_duration:.1f}/{config.delay_seconds:.1f}s",
                (10, 120),
                cv2.FONT_HERSHEY_SIMPLEX,
                0.5,
                TEXT_COLOR,
                1,
            )

        # Settings block, bottom-left
        sound_text = "ON" if config.alerts_enabled else "OFF"
        lines = [
            f"Sensitivity: {config.threshold_ratio:.2f}",
            f"Delay: {config.delay_seconds:g}s",
            f"Sound: {sound_text} ({config.cooldown_seconds:g}s limit)",
        ]
        if config.alerts_enabled and cooldown_remaining > 0:
            lines.append(f"Next chime in: {cooldown_remaining:.0f}s")

        y = h - 15 - 20 * (len(lines) - 1)
        for line in lines:
            text_size = cv2.getTextSize(line, cv2.FONT_HERSHEY_SIMPLEX, 0.5, 1)[0]
            cv2.rectangle(frame, (8, y - text_size[1] - 4), (14 + text_size[0], y + 4), PANEL_COLOR, -1)
            cv2.putText(frame, line, (10, y), cv2.FONT_HERSHEY_SIMPLEX, 0.5, TEXT_COLOR, 1)
            y += 20

    return frame
