# domain/errors.py


class TrackImportError(ValueError):
    """A track document could not be decoded; nothing was changed."""


class LedgerContractError(RuntimeError):
    """A ledger operation was called outside its precondition."""
