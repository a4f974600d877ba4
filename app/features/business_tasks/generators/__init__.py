"""
Task generators package.

One generator per task type; the registry fixes their order.
"""

from .base import TaskGenerator
from .registry import GENERATORS

__all__ = ["GENERATORS", "TaskGenerator"]
