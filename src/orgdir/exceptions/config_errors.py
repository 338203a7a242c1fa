"""
Configuration-related exceptions for orgdir.
"""

from typing import Optional, Dict, Any
from . import DirectoryError, ErrorSeverity, RetryPolicy


class ConfigurationError(DirectoryError):
    """
    Invalid settings or a storage handle used before it was initialized.
    """

    def __init__(
        self,
        message: str,
        config_section: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        context = dict(context or {})
        if config_section:
            context["config_section"] = config_section

        super().__init__(
            message=message,
            error_code="config_error",
            severity=ErrorSeverity.HIGH,
            retry_policy=RetryPolicy.NEVER,
            context=context,
            cause=cause,
        )
        self.config_section = config_section
