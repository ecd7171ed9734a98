"""General utilities, such as exception classes."""


# exactcore-specific exceptions

class ExactCoreError(Exception):
    """Base exactcore error."""

class ModulusMismatchError(ExactCoreError, ValueError):
    """Two modular values with different moduli were combined."""

class NotInvertibleError(ExactCoreError, ZeroDivisionError):
    """A residue has no inverse modulo its modulus."""

class DomainError(ExactCoreError, ValueError):
    """An operation was applied outside of its domain, such as the square root
    of an interval that lies entirely below zero.
    """

