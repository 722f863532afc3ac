"""Mirrorline: temporal pattern memory and narrative insight engine.

Turns a stream of timestamped journal entries into small, evidence-gated
insight cards and tracks how detected patterns evolve across windows.

Usage:
    from mirrorline.insights.engine import compute_insights_for_window

    artifact = compute_insights_for_window(
        "weekly", events, window_start, window_end, previous_snapshots=stored
    )
    store(artifact.snapshots)
"""

__version__ = "0.4.0"
