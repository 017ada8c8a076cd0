"""Custom exceptions for the Modified Dietz engine."""


class ModifiedDietzError(Exception):
    """Base exception."""
    pass


class InvalidPeriodError(ModifiedDietzError):
    """Period end does not strictly follow its start."""
    pass


class InvalidEpsilonError(ModifiedDietzError):
    """Epsilon is outside the closed range [0, 1]."""
    pass


class CashflowImportError(ModifiedDietzError):
    pass
