"""
Supabase Cloud Integration Module
Logs mouth breathing sessions, state changes and alerts to Supabase

Tables:
- breathing_sessions: Session start and summary
- breathing_snapshots: Periodic snapshots of the detector (every N seconds)
- state_changes: Committed OPEN/CLOSED transitions
- alert_events: Chimes played
"""

import logging
import os
import time
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from dotenv import load_dotenv
from supabase import create_client, Client

from mouth_breathing.config import SUPABASE_SNAPSHOT_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


def _utc_now():
    return datetime.now(timezone.utc).isoformat()


def _state_name(committed_state):
    return "OPEN" if committed_state else "CLOSED"


class SupabaseLogger:
    """
    Logs mouth breathing data to Supabase.

    Logging strategy:
    - Periodic snapshots (every N seconds) with ratio and state
    - State changes (immediately, when the committed state flips)
    - Alert events (immediately, when a chime fires)
    - Session summary (on session end)

    Every call is a no-op when the logger is not initialized, and API errors
    are logged rather than raised so the frame loop keeps running.
    """

    def __init__(self, supabase_url: Optional[str] = None, supabase_key: Optional[str] = None,
                 snapshot_interval: float = SUPABASE_SNAPSHOT_INTERVAL_SECONDS):
        """
        Initialize Supabase logger.

        Args:
            supabase_url: Supabase project URL (or from SUPABASE_URL env var)
            supabase_key: Supabase anon key (or from SUPABASE_KEY env var)
            snapshot_interval: Minimum seconds between snapshots
        """
        self.initialized = False
        self.client: Optional[Client] = None
        self.current_session_id: Optional[str] = None
        self.session_start_time: Optional[float] = None
        self.snapshot_interval = snapshot_interval
        self._last_snapshot_ts: Optional[float] = None

        load_dotenv()
        url = supabase_url or os.getenv("SUPABASE_URL")
        key = supabase_key or os.getenv("SUPABASE_KEY")

        if not url or not key:
            logger.warning("Supabase credentials not provided. Cloud logging disabled. "
                           "Set SUPABASE_URL and SUPABASE_KEY in .env or the environment.")
            return

        try:
            self.client = create_client(url, key)
        except Exception as e:
            logger.error("Failed to initialize Supabase logger: %s", e)
            return

        self.initialized = True
        logger.info("Supabase logger initialized")

    def is_initialized(self) -> bool:
        """Check if logger is initialized and ready."""
        return self.initialized

    def _insert(self, table: str, data: Dict[str, Any]) -> bool:
        try:
            self.client.table(table).insert(data).execute()
        except Exception as e:
            logger.error("Error writing to %s: %s", table, e)
            return False
        return True

    def start_session(self, start_time: Optional[float] = None) -> Optional[str]:
        """
        Start a new breathing session.

        Returns:
            Session ID (str) or None if not initialized
        """
        if not self.initialized:
            return None

        self.session_start_time = start_time if start_time is not None else time.time()
        session_id = f"session_{int(self.session_start_time * 1000)}"

        if not self._insert("breathing_sessions", {
            "session_id": session_id,
            "started_at": _utc_now(),
            "status": "active",
        }):
            return None

        self.current_session_id = session_id
        logger.info("Started breathing session: %s", session_id)
        return session_id

    def log_snapshot(self, result, config, force: bool = False):
        """
        Log a periodic snapshot, at most once per snapshot_interval.

        Args:
            result: FrameResult for the current frame
            config: DetectorConfig in effect
            force: Ignore the snapshot interval

        Returns:
            True if a snapshot was written
        """
        if not self.initialized:
            return False

        ts = result.timestamp
        if not force and self._last_snapshot_ts is not None and \
                (ts - self._last_snapshot_ts) < self.snapshot_interval:
            return False

        self._last_snapshot_ts = ts
        return self._insert("breathing_snapshots", {
            "session_id": self.current_session_id,
            "timestamp": _utc_now(),
            "mouth_state": _state_name(result.committed_state),
            "raw_open": result.raw_state,
            "ratio": round(result.ratio, 4) if result.ratio is not None else None,
            "face_present": result.face_present,
            "threshold": config.threshold_ratio,
            "delay_seconds": config.delay_seconds,
            "sound_enabled": config.alerts_enabled,
        })

    def log_state_change(self, old_state: bool, new_state: bool, ratio: Optional[float] = None):
        """
        Log a committed state transition.

        Args:
            old_state: Previous committed state
            new_state: New committed state
            ratio: Mouth ratio on the transition frame
        """
        if not self.initialized or old_state == new_state:
            return False

        return self._insert("state_changes", {
            "session_id": self.current_session_id,
            "timestamp": _utc_now(),
            "old_state": _state_name(old_state),
            "new_state": _state_name(new_state),
            "ratio": round(ratio, 4) if ratio is not None else None,
        })

    def log_alert(self, ratio: Optional[float] = None, cooldown_seconds: Optional[float] = None):
        """
        Log a chime event.

        Args:
            ratio: Mouth ratio when the chime fired
            cooldown_seconds: Cooldown in effect
        """
        if not self.initialized:
            return False

        ok = self._insert("alert_events", {
            "session_id": self.current_session_id,
            "alert_type": "CHIME",
            "timestamp": _utc_now(),
            "ratio": round(ratio, 4) if ratio is not None else None,
            "cooldown_seconds": cooldown_seconds,
        })
        if ok:
            logger.info("Alert logged to Supabase")
        return ok

    def end_session(self, summary: Dict[str, Any]):
        """
        End current session and log summary.

        Args:
            summary: Dict from SessionStats.summary()
        """
        if not self.initialized or not self.current_session_id:
            return False

        session_data = {
            "ended_at": _utc_now(),
            "status": "completed",
        }
        session_data.update(summary)

        try:
            self.client.table("breathing_sessions").update(session_data).eq(
                "session_id", self.current_session_id
            ).execute()
        except Exception as e:
            logger.error("Error ending session: %s", e)
            return False

        logger.info("Session ended: %s (Duration: %.1fs)",
                    self.current_session_id, summary.get("duration_seconds", 0.0))
        self.current_session_id = None
        self.session_start_time = None
        return True
