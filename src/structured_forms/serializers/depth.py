"""
Recursion depth guard
"""

from .errors import MaxDepthExceededError


def check_depth(depth: int, max_depth: int, key: str) -> None:
    """Raise MaxDepthExceededError once depth passes max_depth"""
    if depth > max_depth:
        raise MaxDepthExceededError(max_depth, key)
