"""
Exceptions raised by the visual star feature modules.
"""


class VisualStarError(Exception):
    """Base class for all visualstar errors."""


class PatternError(VisualStarError, ValueError):
    """A search pattern the search engine cannot interpret."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid search pattern {pattern!r}: {reason}")


class KeyMapError(VisualStarError):
    """A key mapping that cannot be registered or resolved."""


class SettingsError(VisualStarError):
    """Settings file exists but cannot be read."""
