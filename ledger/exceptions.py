# ledger/exceptions.py
# This file is part of Footprint Restorer - Soroban storage TTL maintenance
#
# Exceptions raised at the ledger collaborator boundary

"""Domain-specific exceptions for ledger access and transaction handling.

The gateway converts every transport or SDK failure into one of these types.
Components one level up turn them into explicit result values, so none of
them ever escapes a single contract's processing except during setup.
"""


class RestorerError(RuntimeError):
    """Base class for all footprint restorer failures."""

    pass


class QueryFailed(RestorerError):
    """Raised when an account, ledger or ledger-entry query cannot be answered.

    Also covers failed simulations: a simulation is a read-only query of what
    a transaction would need.
    """

    pass


class PrepareFailed(RestorerError):
    """Raised when the network cannot estimate resources for a transaction.

    Typical causes are a malformed footprint or an RPC error during the
    prepare step. The restoration attempt is abandoned, never retried.
    """

    pass


class SubmissionFailed(RestorerError):
    """Raised when a signed transaction could not be delivered to the network."""

    pass


class TransactionFormatError(RestorerError):
    """Raised when a transaction envelope cannot be decoded."""

    pass
