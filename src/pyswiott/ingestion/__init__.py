"""Ingestion layer.

This package turns framed response lines into normalized decode results
for the state store and the operation tracker.
"""

from pyswiott.ingestion.decode import decode_line

__all__ = ["decode_line"]
