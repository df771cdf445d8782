# compliance_core/errors.py


class InvalidInput(Exception):
    """
    Raised when a caller hands the core something it must not guess about:
    malformed dates, non-chronological periods, unknown status spellings.
    Never coerced, always surfaced.
    """


class InvalidRecord(InvalidInput):
    """A vetting record the classifier refuses to evaluate (corrupt or incomplete)."""
