"""Transient user feedback: one current error and a self-clearing success message"""

import asyncio


class Feedback:
    """
    Holds the single current error string and the current success message.

    Errors replace any prior error and persist until cleared. Success
    messages clear themselves after a delay; a newer message cancels the
    pending clear of the older one.
    """

    def __init__(self, success_seconds: float):
        self.success_seconds = success_seconds
        self.error = ""
        self.success_message = ""
        self._clear_handle: asyncio.TimerHandle | None = None

    def fail(self, message: str) -> None:
        self.error = message

    def clear_error(self) -> None:
        self.error = ""

    def succeed(self, message: str, seconds: float | None = None) -> None:
        """Show a success message and schedule its removal on the running loop"""
        self._cancel_clear()
        self.success_message = message
        delay = self.success_seconds if seconds is None else seconds
        self._clear_handle = asyncio.get_running_loop().call_later(delay, self._clear_success)

    def close(self) -> None:
        self._cancel_clear()

    def _clear_success(self) -> None:
        self._clear_handle = None
        self.success_message = ""

    def _cancel_clear(self) -> None:
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None
