"""
release_orchestrator.services

Service-layer package.

Responsibilities:
- Compose settings, the resource client and the orchestrator into one entry point.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services should be pure Python and easily testable with fake clients.
