"""
Price threshold alarm evaluation.

The alarm engine observes records that carry alarms and fires each alarm once
when the price crosses its threshold in the recorded direction.
"""
from .engine import AlarmEngine

__all__ = ["AlarmEngine"]
