"""Execution-strategy package.

Module split:
    - `resolver`: builds the ordered candidate list for a logical model.
    - `executor`: tries candidates sequentially until one succeeds.
"""

from teleporter.strategy.executor import CapabilitySelector, execute
from teleporter.strategy.resolver import ExecutionStrategy, resolve

__all__ = ["CapabilitySelector", "ExecutionStrategy", "execute", "resolve"]
