"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Wallet
  3xxx: Payment account
  4xxx: Offer
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class NotFoundError(AppError):
    """No matching offer or open offer after ownership/takeability filtering."""

    def __init__(self, message: str, code: int = 4004) -> None:
        super().__init__(code, message, 404)


class InvalidArgumentError(AppError):
    """Caller supplied a value that can never succeed."""

    def __init__(self, message: str, code: int = 4000) -> None:
        super().__init__(code, message, 400)


class InvalidStateError(AppError):
    """Arguments are well formed but the system state forbids the operation."""

    def __init__(self, message: str, code: int = 4009) -> None:
        super().__init__(code, message, 422)


# --- 1xxx: Auth ---

class InvalidApiPasswordError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Invalid or missing API password", 401)


# --- 2xxx: Wallet ---

class WalletUnavailableError(InvalidStateError):
    def __init__(self, detail: str = "wallet is not yet available") -> None:
        super().__init__(detail, 2001)


class WalletLockedError(InvalidStateError):
    def __init__(self) -> None:
        super().__init__("wallet is locked", 2002)


# --- 3xxx: Payment account ---

class PaymentAccountNotFoundError(InvalidArgumentError):
    def __init__(self, payment_account_id: str) -> None:
        super().__init__(f"payment account with id {payment_account_id} not found", 3001)


class PaymentAccountMismatchError(InvalidStateError):
    def __init__(self, currency_code: str, payment_account_id: str) -> None:
        super().__init__(
            f"cannot create {currency_code} offer with payment account {payment_account_id}",
            3002,
        )


# --- 4xxx: Offer ---

class OfferNotFoundError(NotFoundError):
    def __init__(self, offer_id: str, reason: str | None = None) -> None:
        message = f"offer with id '{offer_id}' not found"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, 4004)
        self.offer_id = offer_id
        self.reason = reason


class InvalidPriceError(InvalidArgumentError):
    def __init__(self, price: str) -> None:
        super().__init__(f"'{price}' is not a valid price", 4001)


class InvalidDirectionError(InvalidArgumentError):
    def __init__(self, direction: str) -> None:
        super().__init__(f"'{direction}' is not a valid direction", 4002)


class InvalidEditRequestError(InvalidArgumentError):
    def __init__(self, detail: str) -> None:
        super().__init__(detail, 4003)


class OfferPlacementError(InvalidStateError):
    """Registry attached an error message to an offer after a place attempt."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail, 4010)


class RegistryError(AppError):
    """Registry reported an asynchronous failure for a command."""

    def __init__(self, phase: str, detail: str) -> None:
        super().__init__(4020, f"{phase} failed: {detail}", 502)
        self.phase = phase
        self.detail = detail


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
