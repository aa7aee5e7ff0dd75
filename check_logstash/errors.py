"""
check_logstash/errors.py — Fatal error taxonomy.

Every subclass of CheckError ends the run with exit status 3 and a single
diagnostic line. Conditions that are expected during normal operation
(no prior state yet, a threshold left unset) are never raised.
"""


class CheckError(Exception):
    """Base class for failures that abort an evaluation."""


class InvalidField(CheckError):
    """A requested metric path is absent from the snapshot."""

    def __init__(self, path: str):
        super().__init__(f"Invalid field: {path}")
        self.path = path


class FetchFailure(CheckError):
    """The stats API could not be queried or returned an unusable body."""


class StateIOFailure(CheckError):
    """The events state file could not be read, parsed or written."""


class ConfigurationError(CheckError):
    """A threshold or connection option is malformed or out of range."""
