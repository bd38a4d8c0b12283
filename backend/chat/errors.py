"""
Errors raised by the group chat core.
"""


class ChatError(Exception):
    """Base class for chat failures reported to the request caller"""

    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"error": self.message}


class ValidationError(ChatError):
    """Missing or malformed input. Nothing was written."""

    status_code = 400


class StoreError(ChatError):
    """The message store rejected or could not complete the write."""

    status_code = 500
