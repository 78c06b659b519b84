"""Exception hierarchy for quickadd.

Parsing itself never raises: free text is always valid input to a line
parser. Exceptions exist for the surrounding tooling (configuration, CLI).
"""


class QuickAddError(Exception):
    """Base class for all quickadd errors."""


class ConfigError(QuickAddError):
    """Raised when a configuration file cannot be read or understood."""

    def __init__(self, message: str, path=None):
        self.path = path
        super().__init__(message)
