"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Admin
  2xxx: User
  3xxx: War (30xx) / Token (31xx)
  4xxx: Bet
  9xxx: System

Every error here is a caller error from the API's point of view (4xx),
except InternalError.
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


# --- 1xxx: Auth/Admin ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 401)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Admin privileges required", 403)


# --- 2xxx: User ---

class UserNotFoundError(AppError):
    def __init__(self, wallet: str) -> None:
        super().__init__(2001, f"User not found: {wallet}", 404)


class UsernameTakenError(AppError):
    def __init__(self, username: str) -> None:
        super().__init__(2002, f"Username already taken: {username}", 409)


# --- 30xx: War ---

class WarNotFoundError(AppError):
    def __init__(self, war_id: str) -> None:
        super().__init__(3001, f"War not found: {war_id}", 404)


class WarNotActiveError(AppError):
    def __init__(self, war_id: str) -> None:
        super().__init__(3002, f"War is not active: {war_id}", 422)


class WarNotEndedError(AppError):
    def __init__(self, war_id: str) -> None:
        super().__init__(3003, f"War has not ended yet: {war_id}", 422)


class WarAlreadySettledError(AppError):
    def __init__(self, war_id: str) -> None:
        super().__init__(3004, f"War already settled: {war_id}", 409)


class WarNotSettledError(AppError):
    def __init__(self, war_id: str) -> None:
        super().__init__(3005, f"War has not been settled yet: {war_id}", 422)


class WarNotModeratableError(AppError):
    def __init__(self, war_id: str, status: str) -> None:
        super().__init__(
            3006, f"War {war_id} in status {status} cannot be moderated", 409
        )


class InvalidStartPriceError(AppError):
    def __init__(self, side: str, price: object) -> None:
        super().__init__(
            3007, f"Start price of token {side} must be positive, got {price}", 422
        )


class DegeneratePoolError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3008, f"Degenerate pool: {detail}", 422)


# --- 31xx: Token ---

class TokenNotFoundError(AppError):
    def __init__(self, token_ref: str) -> None:
        super().__init__(3101, f"Token not found: {token_ref}", 404)


class InvalidTokenPairError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3102, f"Invalid token pair: {detail}", 422)


# --- 4xxx: Bet ---

class BetNotFoundError(AppError):
    def __init__(self, bet_id: str) -> None:
        super().__init__(4001, f"Bet not found: {bet_id}", 404)


class DuplicateBetError(AppError):
    def __init__(self, transaction_signature: str) -> None:
        super().__init__(
            4002, f"Transaction already processed: {transaction_signature}", 409
        )


class BetBelowMinimumError(AppError):
    def __init__(self, amount: int, minimum: int) -> None:
        super().__init__(
            4003,
            f"Bet amount {amount} lamports is below the war minimum of {minimum} lamports",
            422,
        )


class BetAlreadyClaimedError(AppError):
    def __init__(self, bet_id: str) -> None:
        super().__init__(4004, f"Bet already claimed: {bet_id}", 409)


class BetOwnershipError(AppError):
    def __init__(self, bet_id: str) -> None:
        super().__init__(4005, f"Bet {bet_id} does not belong to this wallet", 403)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
