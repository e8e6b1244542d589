class BooksError(Exception):
    """Base class for every error the ledger core raises.

    Carries a stable machine code, a human message and an optional
    field path (e.g. "lines.0.quantity") for the HTTP layer to surface.
    """

    code = "books_error"

    def __init__(self, message, *, field=None):
        super().__init__(message)
        self.message = message
        self.field = field

    def as_dict(self):
        data = {"code": self.code, "message": self.message}
        if self.field:
            data["field"] = self.field
        return data


class ValidationError(BooksError):
    """Malformed or missing input. Fixable by correcting the request."""

    code = "validation_error"


class NotFoundError(BooksError):
    """A referenced customer, vendor, item, account or document is absent."""

    code = "not_found"


class AccountNotConfiguredError(BooksError):
    """Company chart of accounts is incomplete (operator must fix setup)."""

    code = "account_not_configured"


class InvalidStateError(BooksError):
    """Requested lifecycle transition is not allowed from the current status."""

    code = "invalid_state"


class PaymentExceedsBalanceError(BooksError):
    code = "payment_exceeds_balance"


class AlreadyVoidError(BooksError):
    code = "already_void"


class UnbalancedEntryError(BooksError):
    """Raised when a journal entry fails the double-entry balance check.

    Never caused by user input: it means a posting builder produced bad lines.
    """

    code = "unbalanced_entry"
