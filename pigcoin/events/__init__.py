"""Ledger event logging package."""

from pigcoin.events.logger import EventLogger, configure_logging

__all__ = ["EventLogger", "configure_logging"]
