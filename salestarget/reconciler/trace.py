# ==============================================================================
# salestarget/reconciler/trace.py
# ------------------------------------------------------------------------------
# Diagnostic sink passed into the engine. Every decision taken on a block,
# invoice or line is recorded as an event and, when enabled, logged at DEBUG.
# ==============================================================================

import logging
from dataclasses import dataclass, field


@dataclass
class TraceEvent:
    kind: str
    message: str
    details: dict = field(default_factory=dict)


class ReconciliationTrace:
    """
    Collects TraceEvents for one processing run.

    Args:
        logger (logging.Logger): Where enabled events are written. Defaults to
            this module's logger.
        enabled (bool): When False, events are still recorded but not logged.
    """

    def __init__(self, logger=None, enabled=True):
        self.logger = logger or logging.getLogger(__name__)
        self.enabled = enabled
        self.events = []

    def emit(self, kind, message, **details):
        event = TraceEvent(kind=kind, message=message, details=details)
        self.events.append(event)
        if self.enabled:
            detail_str = " | ".join(f"{k}: {v}" for k, v in details.items())
            self.logger.debug(f"[{kind}] {message}" + (f" | {detail_str}" if detail_str else ""))
        return event

    def of_kind(self, kind):
        return [e for e in self.events if e.kind == kind]
