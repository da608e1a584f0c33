"""Exception hierarchy for prodigy-levels.

Pure level functions never raise for numeric input; these are for the
service layer (db, xp) and surface in the CLI and MCP server.
"""


class ProdigyError(Exception):
    """Base class for every error raised by prodigy-levels."""


class UserNotFoundError(ProdigyError, LookupError):
    def __init__(self, user: int | str) -> None:
        super().__init__(f"User not found: {user}")
        self.user = user


class InvalidXPAmountError(ProdigyError, ValueError):
    def __init__(self, amount: int) -> None:
        super().__init__(f"XP amount must be non-negative, got {amount}")
        self.amount = amount


class DuplicateUserError(ProdigyError, ValueError):
    def __init__(self, username: str) -> None:
        super().__init__(f"Username already taken: {username}")
        self.username = username


class XPRewardOutOfRangeError(InvalidXPAmountError):
    def __init__(self, amount: int, difficulty: str, low: int, high: int) -> None:
        ProdigyError.__init__(
            self,
            f"XP reward must be between {low} and {high} for {difficulty} difficulty",
        )
        self.amount = amount
        self.difficulty = difficulty
        self.low = low
        self.high = high
