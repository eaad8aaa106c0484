"""
Ledger Event Logger

Every ledger mutation and every persistence outcome is written to a
structured local log. This provides:
1. Traceability of what happened to a goal or transaction
2. Visibility into failed saves, which are otherwise silent

The event logger:
- Only logs; it never changes ledger state
- Does not persist anything; the stored snapshots are the only history
"""

import logging
import sys
from typing import Optional

import structlog

from pigcoin.config import get_settings
from pigcoin.models.events import LedgerEvent, LedgerSeverity


def configure_logging(
    level: Optional[str] = None,
    json_logs: Optional[bool] = None,
) -> None:
    """
    Configure structlog for the process.
    
    Defaults come from settings (PIGCOIN_LOG_LEVEL, PIGCOIN_JSON_LOGS).
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    use_json = settings.json_logs if json_logs is None else json_logs
    
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level_name, logging.INFO),
    )
    
    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class EventLogger:
    """
    Central ledger event logging service.
    
    Keeps the last few events in memory so a UI can show recent activity.
    """
    
    def __init__(self, history_size: int = 50):
        self._logger = structlog.get_logger("pigcoin")
        self._history_size = history_size
        self._recent: list[LedgerEvent] = []
    
    @property
    def recent_events(self) -> list[LedgerEvent]:
        """Most recent events, newest first."""
        return list(reversed(self._recent))
    
    def log(self, event: LedgerEvent) -> None:
        """Write an event to the structured log."""
        self._recent.append(event)
        if len(self._recent) > self._history_size:
            del self._recent[0]
        
        log_dict = event.to_log_dict()
        if event.severity == LedgerSeverity.ERROR:
            self._logger.error("ledger_event", **log_dict)
        elif event.severity == LedgerSeverity.WARNING:
            self._logger.warning("ledger_event", **log_dict)
        elif event.severity == LedgerSeverity.DEBUG:
            self._logger.debug("ledger_event", **log_dict)
        else:
            self._logger.info("ledger_event", **log_dict)
