"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Price snapshots
  3xxx: Guesses
  9xxx: System (store, price feed)
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


# --- 1xxx: Auth/User ---

class UsernameExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Username already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 401)


class UserNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1004, f"User not found: {user_id}", 404)


# --- 2xxx: Price snapshots ---

class PriceSnapshotNotFoundError(AppError):
    def __init__(self, snapshot_id: str) -> None:
        super().__init__(2001, f"Price snapshot not found: {snapshot_id}", 404)


class NoPriceSnapshotError(AppError):
    def __init__(self) -> None:
        super().__init__(2002, "No price snapshot recorded yet", 409)


# --- 3xxx: Guesses ---

class GuessNotFoundError(AppError):
    def __init__(self, guess_id: str) -> None:
        super().__init__(3001, f"Guess not found: {guess_id}", 404)


class GuessAlreadyResolvedError(AppError):
    def __init__(self, guess_id: str) -> None:
        super().__init__(3002, f"Guess already resolved: {guess_id}", 409)


class StaleSnapshotError(AppError):
    def __init__(self, snapshot_id: str, latest_id: str) -> None:
        super().__init__(
            3003,
            f"Price snapshot {snapshot_id} is not the latest ({latest_id})",
            409,
        )


# --- 9xxx: System ---

class StoreError(AppError):
    """Any failure of the key-value store collaborator."""

    def __init__(self, detail: str = "Store unavailable") -> None:
        super().__init__(9003, detail, 503)


class ItemNotFoundError(StoreError):
    def __init__(self, collection: str, key: str) -> None:
        super().__init__(f"Item not found: {collection}/{key}")
        self.collection = collection
        self.key = key


class ConditionFailedError(StoreError):
    def __init__(self, collection: str, key: str) -> None:
        super().__init__(f"Conditional write rejected: {collection}/{key}")
        self.collection = collection
        self.key = key


class MalformedItemError(StoreError):
    """A stored document that does not map onto its domain model."""

    def __init__(self, collection: str, key: str, detail: str) -> None:
        super().__init__(f"Malformed item {collection}/{key}: {detail}")
        self.collection = collection
        self.key = key


class PriceFeedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9004, f"Price feed error: {detail}", 502)
