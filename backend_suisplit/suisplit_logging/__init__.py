"""
Structured logging for the SuiSplit backend.

JSON logs with timestamp, level and event_type. Use get_logger() in all modules.
"""

from backend_suisplit.suisplit_logging.logger import bind_address, get_logger, pass_context, short_hex

__all__ = ["bind_address", "get_logger", "pass_context", "short_hex"]
