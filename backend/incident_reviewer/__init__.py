"""Incident Reviewer: track incident reviews and classify them with contributing causes and triggers."""

__version__ = "0.1.0"
