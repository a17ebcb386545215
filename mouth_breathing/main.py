"""
Main Entry Point for the Modular Mouth Breathing Detector

Module structure:
- geometry.py: mouth open ratio and open/closed classification
- debounce.py: hysteresis that stabilizes the per-frame classification
- alert_gate.py: chime rate limiting
- pipeline.py: runs the three stages once per frame
- face_detector.py: MediaPipe Face Mesh landmarks
- alerter.py: chime synthesis and playback
- controls.py / visualizer.py: trackbars and overlay
- session_stats.py / supabase_logger.py: session bookkeeping
- config.py: all configuration constants

Run with: python -m mouth_breathing.main
"""

import argparse
import logging
import time

import cv2

from mouth_breathing.config import (
    CAMERA_INDEX,
    MIRROR_FRAME,
    WINDOW_NAME,
    DRAW_MOUTH_LANDMARKS,
    STATUS_PRINT_INTERVAL_FRAMES,
    SUPABASE_ENABLED,
    load_config_from_env
)
from mouth_breathing.camera_utils import open_camera
from mouth_breathing.face_detector import FaceDetector
from mouth_breathing.pipeline import BreathingPipeline
from mouth_breathing.alerter import ChimePlayer
from mouth_breathing.controls import ControlPanel, ACTION_QUIT, ACTION_RESET, ACTION_TOGGLE_SOUND
from mouth_breathing.visualizer import draw_overlay, draw_reference_points
from mouth_breathing.session_stats import SessionStats
from mouth_breathing.supabase_logger import SupabaseLogger

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description="Mouth Breathing Detector")
    parser.add_argument("--camera", type=int, default=CAMERA_INDEX, help="Camera index (default 0)")
    parser.add_argument("--threshold", type=float, default=None, help="Mouth open ratio threshold (default 0.05)")
    parser.add_argument("--delay", type=float, default=None, help="Detection delay in seconds (default 0)")
    parser.add_argument("--cooldown", type=float, default=None, help="Seconds between chimes (default 60)")
    parser.add_argument("--no-sound", action="store_true", help="Start with the chime disabled")
    parser.add_argument("--no-mirror", action="store_true", help="Do not flip the preview horizontally")
    parser.add_argument("--headless", action="store_true", help="Run without UI window")
    parser.add_argument("--max-frames", type=int, default=0, help="Stop after N frames (0 = run until 'q')")
    parser.add_argument("--cloud", action="store_true", default=SUPABASE_ENABLED,
                        help="Log session to Supabase (needs SUPABASE_URL / SUPABASE_KEY)")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def build_config(args):
    """
    Merge environment/.env settings with command line overrides.

    Raises:
        ValueError: If a value is out of range
    """
    config = load_config_from_env()
    if args.threshold is not None:
        config.threshold_ratio = args.threshold
    if args.delay is not None:
        config.delay_seconds = args.delay
    if args.cooldown is not None:
        config.cooldown_seconds = args.cooldown
    if args.no_sound:
        config.alerts_enabled = False
    return config.validate()


def handle_result(result, config, chime, stats, cloud):
    """
    Apply the side effects of one processed frame.

    Plays the chime at most once per fired result and records the frame.
    """
    previous_state = stats.committed_state
    changed = stats.update(result)

    if changed:
        logger.info("Mouth state: %s", "OPEN" if result.committed_state else "CLOSED")
        if cloud is not None:
            cloud.log_state_change(previous_state, result.committed_state, result.ratio)

    if result.fired:
        chime.play()
        if cloud is not None:
            cloud.log_alert(result.ratio, config.cooldown_seconds)

    if cloud is not None:
        cloud.log_snapshot(result, config)


def reset_detector(pipeline, stats, cloud, timestamp):
    """
    Reset detection state after a manual reset.

    A reset while the mouth is OPEN is recorded as an OPEN -> CLOSED change
    so that the logged episode is closed.
    """
    pipeline.reset(timestamp)
    was_open = stats.reset_state(timestamp)
    if was_open:
        logger.info("Mouth state: CLOSED (reset)")
        if cloud is not None:
            cloud.log_state_change(True, False, None)
    logger.info("Detector state manually reset")


def main(argv=None):
    """Main detection loop."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s - %(levelname)s - %(message)s")

    config = build_config(args)

    print("Starting Mouth Breathing Detector...")
    print("=" * 60)
    print(f"  Sensitivity: {config.threshold_ratio:.2f}")
    print(f"  Delay:       {config.delay_seconds:g}s")
    print(f"  Sound:       {'ON' if config.alerts_enabled else 'OFF'} ({config.cooldown_seconds:g}s limit)")
    print("  Keys: q = quit, s = toggle sound, r = reset")
    print("=" * 60)

    cap = open_camera(index=args.camera)

    face_detector = FaceDetector()
    pipeline = BreathingPipeline()
    chime = ChimePlayer()
    cloud = SupabaseLogger() if args.cloud else None
    controls = ControlPanel(WINDOW_NAME, config)
    if not args.headless:
        controls.attach()

    # Pipeline clock; wall-clock time is only used for the cloud session id
    start_time = time.monotonic()
    stats = SessionStats(start_time)
    if cloud is not None:
        cloud.start_session(time.time())

    frame_count = 0
    consecutive_failures = 0
    last_warning_time = 0

    try:
        while True:
            ret, frame = cap.read()

            if not ret or frame is None or frame.size == 0:
                consecutive_failures += 1

                # Few transient failures: silently retry
                if consecutive_failures <= 5:
                    time.sleep(0.01)
                    continue

                if consecutive_failures <= 20:
                    current_time = time.time()
                    if current_time - last_warning_time > 5.0:
                        logger.warning("Camera glitch detected (%d failures), retrying...", consecutive_failures)
                        last_warning_time = current_time
                    time.sleep(0.05)
                    continue

                logger.error("Camera appears stuck, attempting to re-open...")
                cap.release()
                time.sleep(0.5)
                cap = open_camera(index=args.camera)
                consecutive_failures = 0
                last_warning_time = 0
                logger.info("Camera re-opened, resuming...")
                continue

            consecutive_failures = 0

            if MIRROR_FRAME and not args.no_mirror:
                frame = cv2.flip(frame, 1)

            now = time.monotonic()
            landmarks = face_detector.detect(frame)

            if landmarks is not None:
                result = pipeline.update(landmarks, now, config)
            else:
                result = pipeline.process_missing_face(now)

            handle_result(result, config, chime, stats, cloud)

            frame_count += 1
            if frame_count % STATUS_PRINT_INTERVAL_FRAMES == 0:
                elapsed = now - start_time
                fps = frame_count / elapsed if elapsed > 0 else 0
                if result.face_present:
                    ratio_text = f"{result.ratio:.3f}" if result.ratio is not None else "n/a"
                    print(
                        f"FPS: {fps:.1f} | State: {'OPEN' if result.committed_state else 'CLOSED'} | "
                        f"Ratio: {ratio_text} | Chimes: {stats.alert_count}"
                    )
                else:
                    print(f"FPS: {fps:.1f} | No face detected")

            if args.max_frames and frame_count >= args.max_frames:
                break

            if args.headless:
                continue

            if landmarks is not None and DRAW_MOUTH_LANDMARKS:
                draw_reference_points(frame, face_detector.get_reference_points(landmarks, frame.shape))

            draw_overlay(
                frame,
                result.committed_state,
                ratio=result.ratio,
                config=config,
                face_present=result.face_present,
                pending_duration=pipeline.get_pending_duration(now),
                cooldown_remaining=pipeline.get_cooldown_remaining(now, config),
            )
            cv2.imshow(WINDOW_NAME, frame)

            key = cv2.waitKey(1) & 0xFF
            action = controls.handle_key(key)
            if action == ACTION_QUIT:
                break
            if action == ACTION_RESET:
                reset_detector(pipeline, stats, cloud, now)
            elif action == ACTION_TOGGLE_SOUND:
                logger.info("Sound %s", "enabled" if config.alerts_enabled else "disabled")

    finally:
        cap.release()
        face_detector.close()
        chime.close()
        if not args.headless:
            cv2.destroyAllWindows()

        summary = stats.summary()
        if cloud is not None:
            cloud.end_session(summary)
        print(
            f"Session: {summary['duration_seconds']:.1f}s | Open episodes: {summary['open_episodes']} | "
            f"Open: {summary['open_percentage']:.1f}% | Chimes: {summary['alerts']}"
        )
        print("Shutdown complete.")


if __name__ == "__main__":
    main()
