"""Custom exceptions for Slothodoro."""


class SlothodoroError(Exception):
    """Base exception for all Slothodoro errors."""


class InvalidDuration(SlothodoroError, ValueError):
    """Raised when a phase is armed with a non-positive duration."""


class DecodeError(SlothodoroError, ValueError):
    """Raised when a share token cannot be decoded (bad alphabet, padding or JSON)."""


class StorageCorrupt(SlothodoroError):
    """Raised when the persisted state blob cannot be parsed."""
