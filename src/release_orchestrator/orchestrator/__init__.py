"""
release_orchestrator.orchestrator

Release orchestration.

Responsibilities:
- Bounded-concurrency mapping over independent creations.
- The release → image → label/env-var creation algorithm.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Call sites outside the package should prefer `services.release_service.ReleaseService`.
