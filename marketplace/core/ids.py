# marketplace/core/ids.py
import uuid


def generate_id(prefix: str) -> str:
    """
    Generate a string key like "o3f2a...": a short type prefix plus a UUID4.

    Args:
        prefix: "p" (product), "r" (review), "o" (order), ...
    """
    return f"{prefix}{uuid.uuid4().hex}"
