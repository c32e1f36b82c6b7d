"""
Exception hierarchy for the wind field renderer.

Empty observation input is never an error: it is the defined
"render nothing" state. These exceptions cover misuse and bad files.
"""

from typing import Optional


class WindFieldError(Exception):
    """Base exception for wind field errors."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.message = message
        self.source = source
        super().__init__(message)


class ObservationLoadError(WindFieldError):
    """Raised when an observation file cannot be read or parsed."""
    pass


class RendererClosedError(WindFieldError):
    """Raised when a frame is requested from a renderer after close()."""
    pass


class UnknownThemeError(WindFieldError):
    """Raised when a render style name is not registered."""
    pass
