"""Ledger error taxonomy. Each error knows the HTTP status it maps to."""


class LedgerError(Exception):
    status_code = 500


class ValidationError(LedgerError):
    """Missing or invalid input."""

    status_code = 400


class NotFoundError(LedgerError):
    status_code = 404


class AlreadyClosedError(LedgerError):
    """The trade already has a sell leg."""

    status_code = 400


class UpstreamError(LedgerError):
    """The exchange rate API failed. The message is passed through verbatim."""

    status_code = 500
