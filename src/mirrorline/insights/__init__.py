"""Insight engine: card producers, contract gate and artifact orchestrator.

Entry point is ``mirrorline.insights.engine.compute_insights_for_window``.
Submodules are imported directly; this package exports nothing so that the
memory layer can depend on ``mirrorline.insights.patterns`` without pulling
in the orchestrator.
"""
