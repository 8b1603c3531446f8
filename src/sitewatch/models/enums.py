"""Enumerations for sitewatch models."""

from enum import Enum


class StatusClass(str, Enum):
    """Dashboard classification of an HTTP status code."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"
    NONE = ""

    @classmethod
    def for_code(cls, status_code: int) -> "StatusClass":
        if status_code == 200:
            return cls.OK
        if 400 <= status_code < 500:
            return cls.WARNING
        if status_code >= 500:
            return cls.ERROR
        return cls.NONE
