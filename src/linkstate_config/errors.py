"""Error taxonomy for configuration validation.

Every error aborts validation. The daemon is expected to log the message
and refuse to start.
"""
from typing import Optional


class ConfigError(Exception):
    """Base class for all configuration errors."""
    pass


class ParseError(ConfigError):
    """Document cannot be decoded into the typed field tree."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class DuplicateAreaError(ConfigError):
    """Area identifier declared more than once."""

    def __init__(self, area_id: str):
        self.area_id = area_id
        super().__init__(f"Duplicate area config: area_id {area_id}")


class EmptyAreaRuleError(ConfigError):
    """Area declared with neither neighbor nor interface patterns."""

    def __init__(self, area_id: str):
        self.area_id = area_id
        super().__init__(
            f"Invalid config for area {area_id}. At least one non-empty "
            f"regexes for neighbor or interface"
        )


class PatternCompileError(ConfigError):
    """A user supplied pattern failed to compile."""

    def __init__(self, pattern: str, owner: str, reason: str):
        self.pattern = pattern
        self.owner = owner
        self.reason = reason
        super().__init__(
            f"Failed to add regex: {pattern} for {owner}. Error: {reason}"
        )


class OutOfRangeError(ConfigError):
    """Numeric field outside its documented interval."""
    pass


class InvalidArgumentError(ConfigError):
    """Structurally inconsistent combination of fields."""
    pass


class MalformedAddressError(ConfigError):
    """Network prefix text cannot be parsed."""
    pass


class IncompatibleModeError(ConfigError):
    """Feature combination not supported (topology or algorithm mismatch)."""
    pass
