"""Safety switch and deadline."""

from .switch import ACTIVE, SILENT, Clock, Deadline, SafetySwitch

__all__ = ["ACTIVE", "SILENT", "Clock", "Deadline", "SafetySwitch"]
