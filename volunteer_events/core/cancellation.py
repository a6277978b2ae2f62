"""
Cancellation token tied to a view's lifetime.

A screen creates one token when it mounts and cancels it when it is torn
down; loaders check it after every await and drop late results.
"""


class CancellationToken:
    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


def is_cancelled(token: CancellationToken | None) -> bool:
    return token is not None and token.cancelled
