"""
release_orchestrator.models

Data shapes exchanged with the resource store and with callers.

Responsibilities:
- Record attributes (what we send) and record models (what we read back).
- The normalized composition accepted as input.
"""

# Package marker.
