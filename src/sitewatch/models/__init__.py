"""Sitewatch data models."""

from sitewatch.models.enums import StatusClass
from sitewatch.models.runtime import Observation, TargetStatus

__all__ = [
    "StatusClass",
    "Observation",
    "TargetStatus",
]
