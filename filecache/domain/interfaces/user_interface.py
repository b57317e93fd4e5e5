"""Interface for reporting results to the user.

Defines the contract for displaying values, errors, warnings and
informational messages, allowing different UI implementations (console,
captured output in tests).
"""

import abc
from typing import Any, Dict


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_output(self, output: str, **kwargs: Any) -> None:
        """Displays standard output to the user.

        Args:
            output: The text to display.
            **kwargs: Additional arguments for formatting (e.g., title).
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass

    def display_mapping(self, values: Dict[str, Any], title: str = "Entries") -> None:
        """Displays several key/value pairs at once.

        Args:
            values: The pairs to display, in order.
            title: Heading for the group.
        """
        for key, value in values.items():
            self.display_output(f"{key} = {value!r}")
