"""
Exception types raised by the comparison harness.
"""

from typing import Optional


class HarnessError(Exception):
    """Base exception for harness errors"""
    pass


class NoResultsToAverageError(HarnessError):
    """Raised when trial averaging is asked to fold zero results"""
    def __init__(self, message: str = "No results to average"):
        super().__init__(message)


class ConfigurationError(HarnessError):
    """Raised when a model or provider configuration cannot be honoured"""
    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider
