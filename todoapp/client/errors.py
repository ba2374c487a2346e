from typing import Optional


class BackendError(Exception):
    """A remote operation failed. ``message`` is meant to be shown to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __repr__(self):
        return f"BackendError({self.message!r}, status_code={self.status_code!r})"
