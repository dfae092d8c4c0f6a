"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  3xxx: Trade
  4xxx: Notification
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


# --- 1xxx: Auth/User ---

class InvalidInputError(AppError):
    """Rule-violating input. The message is shown to the user as-is."""

    def __init__(self, message: str) -> None:
        super().__init__(1000, message, 400)


class UsernameExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Username is already taken", 400)


class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email is already registered", 400)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 401)


class TokenMissingError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Access token required", 401)


class InvalidTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Invalid or expired token", 403)


class UserNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1006, f"User not found: {user_id}", 404)


# --- 3xxx: Trade ---

class TradeItemsRequiredError(AppError):
    def __init__(self, side: str) -> None:
        super().__init__(3001, f"Please add at least one item you are {side}", 400)


class InvalidExpiryError(AppError):
    def __init__(self, value: object) -> None:
        super().__init__(
            3002,
            f"expiryDays must be a positive number of days or 'never', got {value!r}",
            400,
        )


# --- 4xxx: Notification ---

class NotificationNotFoundError(AppError):
    def __init__(self, notification_id: str) -> None:
        super().__init__(4001, f"Notification not found: {notification_id}", 404)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Server error") -> None:
        super().__init__(9002, detail, 500)


class DevEndpointDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(9003, "Not found", 404)
