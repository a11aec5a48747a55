"""
Custom exceptions for the marketplace order sync.

Exception Hierarchy:
    MarketplaceSyncError (base)
    ├── ConfigurationError      - required setting missing or invalid
    ├── InputFileNotFoundError  - local tracking/invoice file does not exist
    ├── UnsupportedFormatError  - invoice extension outside the allow-list
    ├── InvalidInvoiceNameError - invoice file name carries no order id
    ├── TransportError          - connection, DNS or socket failure
    ├── HttpStatusError         - non-2xx response from the marketplace
    ├── DecodeError             - malformed response body or local XML file
    └── DocumentUploadError     - upload accepted over HTTP, rejected in the body

Usage:
    None of these are retried. Every one of them aborts the running command;
    the CLI logs it and exits non-zero.
"""


class MarketplaceSyncError(Exception):
    """
    Base exception for all marketplace order sync errors.

    Callers can catch every application error with a single except clause.
    """

    def __init__(self, message, details=None):
        """
        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# LOCAL ERRORS - raised before any network call
# =============================================================================

class ConfigurationError(MarketplaceSyncError):
    """A required setting is missing from both the environment and the settings file."""

    def __init__(self, key, settings_file=None):
        message = f"Missing or invalid setting: {key}"
        details = {"key": key}
        if settings_file:
            details["settings_file"] = settings_file
        super().__init__(message, details)
        self.key = key


class InputFileNotFoundError(MarketplaceSyncError):
    """The tracking or invoice file given on the command line does not exist."""

    def __init__(self, kind, path):
        message = f"{kind.capitalize()} file does not exist: {path}"
        super().__init__(message, {"path": path})
        self.kind = kind
        self.path = path


class UnsupportedFormatError(MarketplaceSyncError):
    """
    The invoice file extension is not one the marketplace accepts as a document.

    The check is case-insensitive, so `INVOICE.PDF` passes and `a.EXE` fails.
    """

    def __init__(self, extension, allowed):
        message = f"Document format not supported: {extension or '<none>'}"
        details = {"extension": extension, "allowed": ", ".join(allowed)}
        super().__init__(message, details)
        self.extension = extension


class InvalidInvoiceNameError(MarketplaceSyncError):
    """
    The invoice file name does not follow `<order_id>_<anything>.<ext>`.

    The order id is everything before the first underscore, so a name without
    an underscore (or starting with one) has no order id.
    """

    def __init__(self, file_name):
        message = f"Cannot derive an order id from invoice file name: {file_name}"
        details = {"expected": "<order_id>_<anything>.<ext>"}
        super().__init__(message, details)
        self.file_name = file_name


# =============================================================================
# REMOTE ERRORS - raised while talking to the marketplace
# =============================================================================

class TransportError(MarketplaceSyncError):
    """The request never produced a response (connection refused, DNS, reset...)."""

    def __init__(self, url, reason):
        super().__init__(f"Request to {url} failed: {reason}", {"url": url})
        self.url = url
        self.reason = reason


class HttpStatusError(MarketplaceSyncError):
    """The marketplace answered with a non-success HTTP status."""

    def __init__(self, status_code, body, url=None):
        message = f"HTTP {status_code} from {url or 'marketplace'}"
        details = {"status_code": status_code, "body": body}
        super().__init__(message, details)
        self.status_code = status_code
        self.body = body
        self.url = url


class DecodeError(MarketplaceSyncError):
    """A response body or a local XML file could not be decoded into the expected shape."""

    def __init__(self, what, reason):
        super().__init__(f"Could not decode {what}: {reason}", {"what": what})
        self.what = what
        self.reason = reason


class DocumentUploadError(MarketplaceSyncError):
    """
    The documents endpoint returned HTTP success but reported errors in its body.

    The full decoded `DocumentUploadResult` is kept on `result` so the caller
    can inspect every per-field error, not just the count.
    """

    def __init__(self, result, order_id=None):
        message = f"Document upload rejected with {result.errors_count} error(s)"
        details = {"errors": [str(error) for error in result.errors]}
        if order_id:
            details["order_id"] = order_id
        super().__init__(message, details)
        self.result = result
        self.order_id = order_id
