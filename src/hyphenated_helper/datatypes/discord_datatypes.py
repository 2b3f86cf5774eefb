"""
Type-safe wrapper for Discord user snowflake IDs.

Configuration files list privileged users either as YAML integers or as
quoted strings (Discord clients copy IDs as text). UserID accepts both and
normalizes them, so the allow-list compares equal no matter how an ID was
written.
"""

from __future__ import annotations

from typing import Union

import discord


class UserID:
    """
    Type-safe wrapper for Discord user snowflake IDs.

    Attributes:
        _value (str): The snowflake ID stored as a string.

    Example:
        >>> uid = UserID("71242588694249472")
        >>> uid.to_int()
        71242588694249472
        >>> UserID(71242588694249472) == "71242588694249472"
        True
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int, "UserID"]) -> None:
        """
        Initialize a UserID from a string, int, or another UserID.

        Raises:
            ValueError: If the value is not a positive integer snowflake.
        """
        if isinstance(value, UserID):
            self._value = value._value
            return
        # bool is an int subclass but never a valid snowflake
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise ValueError(f"Cannot create UserID from {type(value).__name__}: {value}")

        number = int(value.strip()) if isinstance(value, str) else value
        if number <= 0:
            raise ValueError(f"Snowflake IDs must be positive, got {value}")
        self._value = str(number)

    @classmethod
    def from_user(cls, user: Union[discord.Member, discord.User]) -> "UserID":
        """Create a UserID from a Discord Member or User object."""
        return cls(user.id)

    def to_int(self) -> int:
        """Convert to an integer for Discord API calls."""
        return int(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"UserID({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UserID):
            return self._value == other._value
        if isinstance(other, str):
            return self._value == other
        if isinstance(other, int):
            return self._value == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)
