"""
Record id helpers
"""
import uuid


def new_id(prefix: str) -> str:
    """``<prefix>_<12 hex chars>``, e.g. ``bk_4f0c2a9d1b3e``"""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def sequential_id(prefix: str, number: int, width: int = 3) -> str:
    """``show_001`` style ids used by the demo data"""
    return f"{prefix}_{number:0{width}d}"
