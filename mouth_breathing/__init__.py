"""
Modular Mouth Breathing Detection System

This package contains all modules for mouth breathing detection:
- Mouth open ratio (geometry)
- Debounced mouth state
- Alert cooldown gating
- Per-frame pipeline
- Face landmark detection
- Chime playback
- Controls and visualization
"""

__version__ = "1.0.0"
