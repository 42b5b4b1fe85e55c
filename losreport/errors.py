"""Exceptions raised by the length-of-stay report pipeline."""


class LosReportError(Exception):
    pass


class InvalidInputError(LosReportError, ValueError):
    """A raw value could not be encoded (unknown category, out of range, bad type)."""


class InsufficientDataError(LosReportError):
    """Too few rows or observed values to compute a statistic."""


class DegenerateInputError(LosReportError):
    """Predictor columns are perfectly collinear."""
