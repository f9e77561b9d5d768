import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional
from .config import Config
from .exceptions import LoggerError

class _ContextFilter(logging.Filter):
    """Fill in user/action for records emitted without them"""

    def filter(self, record: logging.LogRecord) -> bool:
        for field in ("user", "action"):
            if not hasattr(record, field):
                setattr(record, field, "-")
        return True

class Logger:
    _loggers: Dict[str, logging.Logger] = {}

    def __init__(self, config: Config):
        """Initialize logger with configuration"""
        self.config = config

        logger_name = self.config.get("logging.name", "src")
        if logger_name in self._loggers:
            self.logger = self._loggers[logger_name]
            for handler in self.logger.handlers[:]:
                self.logger.removeHandler(handler)
                handler.close()
        else:
            self.logger = logging.getLogger(logger_name)
            self._loggers[logger_name] = self.logger

        level = self._get_log_level()
        self.logger.setLevel(level)

        self.formatter = logging.Formatter(
            self.config.get(
                "logging.format",
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ) + ' - user:%(user)s - action:%(action)s'
        )
        self._context_filter = _ContextFilter()

        log_file = self.config.get("logging.file")
        if log_file:
            try:
                path = Path(log_file)
                if not path.parent.exists() and str(path.parent) != ".":
                    try:
                        path.parent.mkdir(parents=True, exist_ok=True)
                    except (OSError, PermissionError):
                        raise LoggerError(f"Cannot create log directory: {path.parent}")

                max_size = self.config.get("logging.max_size", 1024 * 1024)  # 1MB default
                backup_count = self.config.get("logging.backup_count", 3)

                handler = RotatingFileHandler(
                    str(path),
                    maxBytes=max_size,
                    backupCount=backup_count
                )
                self._attach(handler)
            except LoggerError:
                raise
            except Exception as e:
                raise LoggerError(f"Failed to setup log file: {str(e)}")

        if self.config.get("logging.console_output", False):
            self._attach(logging.StreamHandler())

    def _attach(self, handler: logging.Handler) -> None:
        handler.setFormatter(self.formatter)
        handler.addFilter(self._context_filter)
        self.logger.addHandler(handler)

    def _get_log_level(self) -> int:
        """Convert string log level to logging constant"""
        level_name = str(self.config.get("logging.level", "INFO")).upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise LoggerError(f"Invalid log level: {level_name}")
        return level

    def _prepare_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        extra_context = {
            'user': '-',
            'action': '-'
        }
        if extra:
            extra_context.update(extra)
        return extra_context

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message"""
        self.logger.debug(message, extra=self._prepare_extra(kwargs.get('extra')))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message"""
        self.logger.info(message, extra=self._prepare_extra(kwargs.get('extra')))

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message"""
        self.logger.warning(message, extra=self._prepare_extra(kwargs.get('extra')))

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message"""
        self.logger.error(message, extra=self._prepare_extra(kwargs.get('extra')))
