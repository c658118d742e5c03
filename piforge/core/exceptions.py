"""Custom exceptions used throughout the piforge package."""

from typing import Any, Optional


class PiforgeError(Exception):
    """Base exception for all piforge errors.

    Register bank operations never raise; these exceptions are reserved for
    the editing API, configuration loading and guest construction.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Additional context about the error
        """

        super().__init__(message)
        self.details = details or {}


class ConfigurationError(PiforgeError):
    """Raised when the YAML configuration is missing keys or holds bad values."""

    def __init__(
        self,
        config_key: Optional[str] = None,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        """Initialize configuration error.

        Args:
            config_key: The configuration key that caused the error
            message: Description of what's wrong. If omitted, config_key is
                treated as the message and the key defaults to "configuration".
            details: Additional context
        """
        if message is None:
            message = config_key or "Invalid configuration"
            config_key = "configuration"
        if config_key is None:
            config_key = "configuration"

        super().__init__(
            message=f"Configuration error for '{config_key}': {message}",
            details=details,
        )
        self.config_key = config_key


class CircuitError(PiforgeError):
    """Raised when an edit would leave the wiring graph inconsistent.

    Examples:
    - Wire endpoint naming a pin the component does not declare
    - Host pin outside 0-27
    - Props record that does not belong to the component type
    """

    def __init__(
        self,
        message: str,
        component_id: Optional[str] = None,
        pin: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        details = details or {}
        if component_id is not None:
            details["component_id"] = component_id
        if pin is not None:
            details["pin"] = pin

        super().__init__(message=message, details=details)
        self.component_id = component_id
        self.pin = pin


class GuestStartError(PiforgeError):
    """Raised by a guest factory when the virtual machine cannot be built."""
