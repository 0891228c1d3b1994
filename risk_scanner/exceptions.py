"""
Errors raised by the audit engine.
"""


class AuditError(Exception):
    """Base class for all errors raised by the scanner."""


class InvalidInputError(AuditError, ValueError):
    """The audit request has no usable source text or an unknown input mode."""


class UnsupportedModeError(AuditError, NotImplementedError):
    """The input mode is recognized but not implemented (e.g. address lookup)."""


class CopilotError(AuditError):
    """The audit copilot could not produce an answer."""
