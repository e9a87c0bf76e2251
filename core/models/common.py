# =============================================================================
# core/models/common.py - Response Envelope
# =============================================================================
# Every endpoint answers with the same wrapper:
#   {"success": true, "data": ...}
#   {"success": false, "error": "..."}
# =============================================================================

from typing import Any


def ok(data: Any = None) -> dict[str, Any]:
    """Build a success envelope."""
    return {"success": True, "data": data}
