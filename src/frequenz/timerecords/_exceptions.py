# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Time records exceptions."""

from typing import Any


class EmptyTimeSeriesError(ValueError):
    """An operation needs at least one record but the time series is empty."""

    def __init__(self, operation: str) -> None:
        """Create an instance.

        Args:
            operation: The name of the operation that was attempted.
        """
        super().__init__(f"Can't {operation} an empty time series")
        self.operation = operation
        """The name of the operation that was attempted."""


class UnsupportedValueTypeError(TypeError):
    """The values of a time series lack the arithmetic an operation needs.

    Linear interpolation and integration need values that can be added to each
    other and multiplied by a scalar.
    """

    def __init__(self, value: Any, operation: str) -> None:
        """Create an instance.

        Args:
            value: A sample value that failed the capability check.
            operation: The name of the operation that was attempted.
        """
        super().__init__(
            f"Can't {operation} values of type {type(value).__name__}: "
            "they must support addition and multiplication by a scalar"
        )
        self.value_type: type = type(value)
        """The type of the offending values."""

        self.operation = operation
        """The name of the operation that was attempted."""

    def __repr__(self) -> str:
        """Return the representation of the instance.

        Returns:
            The representation of the instance.
        """
        return f"{self.__class__.__name__}({self.value_type.__name__}, {self.operation!r})"
