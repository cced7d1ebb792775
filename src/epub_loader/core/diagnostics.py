"""Collection of non-fatal parse problems."""

import logging
from typing import Callable

log = logging.getLogger(__name__)

WarningSink = Callable[[str], None]


class Diagnostics:
    """Records degraded conditions so a parse can continue past them.

    Every message is logged at WARNING, kept in ``messages`` and forwarded
    to the optional sink supplied by the caller.
    """

    def __init__(self, sink: WarningSink | None = None):
        self.messages: list[str] = []
        self._sink = sink

    def warn(self, message: str) -> None:
        log.warning(message)
        self.messages.append(message)
        if self._sink is not None:
            self._sink(message)
