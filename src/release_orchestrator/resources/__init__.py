"""
release_orchestrator.resources

Resource protocol boundary.

Responsibilities:
- Client interface (and HTTP implementation) for the remote resource store.
- Semantic error taxonomy for failed calls.
- Call helpers that classify failures before they reach orchestration logic.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The orchestrator should depend on `resources.operations`, never on httpx directly.
