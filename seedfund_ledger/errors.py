"""Error taxonomy for ledger operations.

Every rejected operation raises a subclass of :class:`LedgerError`. The class
name is the stable error code, and the category tells callers whether a retry
can ever succeed: state errors depend on the current ledger state and may clear
later, validation and authorization errors never will.
"""

from enum import Enum


class ErrorCategory(Enum):
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    STATE = "state"
    EXTERNAL = "external"


class LedgerError(Exception):
    """Base class for all ledger errors."""

    category: ErrorCategory = ErrorCategory.STATE

    @property
    def code(self) -> str:
        return type(self).__name__

    @property
    def retryable(self) -> bool:
        return self.category is ErrorCategory.STATE


class ValidationError(LedgerError, ValueError):
    category = ErrorCategory.VALIDATION


class AuthorizationError(LedgerError, PermissionError):
    category = ErrorCategory.AUTHORIZATION


class StateError(LedgerError, RuntimeError):
    category = ErrorCategory.STATE


class ExternalError(LedgerError):
    category = ErrorCategory.EXTERNAL


# Validation
class InvalidCount(ValidationError):
    pass


class InvalidRange(ValidationError):
    pass


class BatchTooLarge(ValidationError):
    pass


class InvalidAddress(ValidationError):
    pass


class InvalidFeeConfig(ValidationError):
    pass


class UnknownRecord(ValidationError):
    pass


# Authorization
class NotAdmin(AuthorizationError):
    pass


class NotHolder(AuthorizationError):
    pass


class AdminFrozen(AuthorizationError):
    pass


# State
class DepositWindowClosed(StateError):
    pass


class SupplyExceeded(StateError):
    pass


class HolderCapExceeded(StateError):
    pass


class TransferLocked(StateError):
    pass


class NothingToClaim(StateError):
    pass


class AssetAlreadyRegistered(StateError):
    pass


class UnknownAsset(StateError):
    pass


class ReentrantCall(StateError):
    pass


class InsufficientBalance(StateError):
    pass


# External
class CustodianCallFailed(ExternalError):
    pass
