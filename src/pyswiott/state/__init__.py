"""State/store layer.

This package is the single source of truth for how decoded response
frames are merged into the latest-known sensor state.
"""
