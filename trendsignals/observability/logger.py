"""
Logging for the signal engine.

Every record may carry keyword extras (pair, strategy, indicator values)
which the JSON formatter writes as top-level keys and the text formatter
appends as key=value pairs. Direction changes are logged at INFO, the
per-tick indicator values each rule reads at DEBUG.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO


class JSONFormatter(logging.Formatter):
    """One JSON object per record, extras merged in as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = getattr(record, "extra_fields", None)
        if extras:
            # Reserved keys win over extras of the same name
            log_data.update({k: v for k, v in extras.items() if k not in log_data})

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Console output for replays: `LEVEL name: message | key=value ...`."""

    def __init__(self, include_timestamps: bool = True):
        super().__init__()
        self.include_timestamps = include_timestamps

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname:8} {record.name}: {record.getMessage()}"
        if self.include_timestamps:
            timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
            line = f"[{timestamp}] {line}"

        extras = getattr(record, "extra_fields", None)
        if extras:
            line += " | " + " | ".join(f"{k}={v}" for k, v in extras.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


class StructuredLogger:
    """
    Standard logger taking keyword extras on every call.

    Extras are only built into a record when the level is enabled, so
    the per-tick DEBUG calls in the decision rules cost a level check
    when debugging is off.
    """

    def __init__(self, name: str, logger: logging.Logger):
        self._name = name
        self._logger = logger

    def _log(self, level: int, msg: str, **kwargs) -> None:
        if not self._logger.isEnabledFor(level):
            return
        record = self._logger.makeRecord(self._name, level, "", 0, msg, (), None)
        if kwargs:
            record.extra_fields = kwargs
        self._logger.handle(record)

    def debug(self, msg: str, **kwargs) -> None:
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs) -> None:
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs) -> None:
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs) -> None:
        self._log(logging.ERROR, msg, **kwargs)

    def evaluation(self, tag: str, pair: str, **values) -> None:
        """
        Log the indicator values a decision rule compared this tick.

        Args:
            tag: Rule tag, e.g. "MACD" or "MA][CROSS".
            pair: Instrument symbol.
            **values: Indicator values read by the rule.
        """
        self.debug(f"[{tag}] {pair}", pair=pair, **values)

    def signal_change(
        self,
        action: str,
        strategy: str,
        pair: str,
        reason: str,
        **kwargs
    ) -> None:
        """
        Log a strategy switching direction.

        The message reads `[BUY][MA_CROSS] BTC/USD, signal: <reason>` so
        changes can be grepped by action and strategy in text output.
        """
        self.info(
            f"[{action}][{strategy.upper()}] {pair}, signal: {reason}",
            action=action,
            strategy=strategy,
            pair=pair,
            **kwargs
        )


_loggers: dict[str, StructuredLogger] = {}
_configured = False


def configure_logging(
    level: str = "INFO",
    format_type: str = "json",
    include_timestamps: bool = True,
    stream: Optional[TextIO] = None
) -> None:
    """
    Install a single root handler for the engine.

    Args:
        level: Log level name. DEBUG also emits per-tick rule evaluations.
        format_type: "json" or "text".
        include_timestamps: Prefix text lines with a UTC timestamp.
        stream: Output stream, stdout by default.
    """
    global _configured

    log_level = getattr(logging, level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(log_level)

    if format_type.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter(include_timestamps=include_timestamps))

    root_logger.addHandler(handler)
    _configured = True


def get_logger(name: str) -> StructuredLogger:
    """
    Get the structured logger for a module, configuring defaults on first use.
    """
    if not _configured:
        configure_logging()

    if name not in _loggers:
        _loggers[name] = StructuredLogger(name, logging.getLogger(name))

    return _loggers[name]
