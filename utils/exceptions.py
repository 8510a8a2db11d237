"""Custom exception hierarchy for the trade journal.

The analytics engine itself is total over well-formed input; these
exceptions cover configuration, caller mistakes and the thin lifecycle
and export layers around it.
"""


# Base Exception
class TradeJournalError(Exception):
    """Base exception for all trade journal errors."""

    pass


# Configuration Errors
class ConfigurationError(TradeJournalError):
    """Base class for configuration-related errors."""

    pass


class InvalidSettingsError(ConfigurationError, ValueError):
    """Raised when settings validation fails."""

    pass


# Journal Errors
class JournalError(TradeJournalError):
    """Base class for trade ledger and lifecycle errors."""

    pass


class TradeNotFoundError(JournalError, KeyError):
    """Raised when a trade id is not present in the ledger."""

    pass


class DuplicateTradeError(JournalError):
    """Raised when a trade id is already present in the ledger."""

    pass


class TradeStateError(JournalError):
    """Raised when a lifecycle transition is not allowed (e.g. closing a closed trade)."""

    pass


# Analytics Errors
class AnalyticsError(TradeJournalError):
    """Base class for analytics request errors."""

    pass


class InvalidTimeWindowError(AnalyticsError, ValueError):
    """Raised when a date-range window label is not recognised."""

    pass


# Export Errors
class ExportError(TradeJournalError):
    """Raised when aggregates cannot be exported."""

    pass


# Cache Errors
class ProfileCacheError(TradeJournalError):
    """Raised when a profile cannot be resolved from cache or fetcher."""

    pass
