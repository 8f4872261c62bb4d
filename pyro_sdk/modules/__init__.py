"""
Functional modules for Pyro SDK
"""

from .confirmation import ConfirmationTracker, meets_target

__all__ = [
    "ConfirmationTracker",
    "meets_target",
]
