import logging
import inspect
from typing import Any, Dict, Optional
from datetime import datetime, timezone

import structlog
from colorama import Fore, Style, init as colorama_init

colorama_init()


class JohnWickLogger:
    """
    Named structlog logger writing a coloured line to the console and a JSON
    line to ``log_file``. Instances with the same name share handlers.
    """

    _logger_cache: Dict[str, "JohnWickLogger"] = {}

    LEVEL_COLORS = {
        "DEBUG": Fore.CYAN,
        "INFO": Fore.GREEN,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Style.BRIGHT + Fore.RED,
    }

    def __init__(
        self,
        name: str = "default",
        log_file: Optional[str] = "app.log",
        level: str = "INFO",
        context: Optional[dict] = None,
    ):
        self.name = name
        self.context = context or {}

        if name in self._logger_cache:
            cached = self._logger_cache[name]
            self.console_logger = cached.console_logger.bind(**self.context)
            self.file_logger = cached.file_logger.bind(**self.context) if cached.file_logger else None
            return

        def add_caller(logger, method_name, event_dict):
            frame = inspect.currentframe()
            while frame:
                module_name = frame.f_globals.get("__name__", "")
                if not module_name.startswith("structlog") and not module_name.endswith("john_wick_logger"):
                    event_dict["module"] = module_name
                    event_dict["function"] = frame.f_code.co_name
                    event_dict["lineno"] = frame.f_lineno
                    break
                frame = frame.f_back
            return event_dict

        def console_renderer(logger, method_name, event_dict):
            ts = event_dict.pop("timestamp", None) or datetime.now(timezone.utc).isoformat()
            level = event_dict.pop("level", method_name).upper()
            msg = event_dict.pop("event", "")
            event_dict.pop("logger", None)
            module = event_dict.pop("module", "")
            func = event_dict.pop("function", "")
            lineno = event_dict.pop("lineno", "")
            event_dict.pop("exc_info", None)

            # caller only for WARNING and above
            caller = f" {module}.{func}:{lineno}" if level in ("WARNING", "ERROR", "CRITICAL") and module else ""
            fields = " ".join(f"{k}={v}" for k, v in event_dict.items())
            color = self.LEVEL_COLORS.get(level, "")
            return f"{color}{ts} [{name}] {level}: {msg}{caller} {fields}".rstrip() + Style.RESET_ALL

        log_level = getattr(logging, level.upper(), logging.INFO)

        console_logger = logging.getLogger(f"{name}_console")
        console_logger.setLevel(log_level)
        console_logger.propagate = False
        if not console_logger.handlers:
            ch = logging.StreamHandler()
            ch.setFormatter(logging.Formatter("%(message)s"))
            console_logger.addHandler(ch)

        self.console_logger = structlog.wrap_logger(
            console_logger,
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                add_caller,
                console_renderer,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
        ).bind(logger=name, **self.context)

        self.file_logger = None
        if log_file:
            file_logger = logging.getLogger(f"{name}_file")
            file_logger.setLevel(log_level)
            file_logger.propagate = False
            if not any(isinstance(h, logging.FileHandler) for h in file_logger.handlers):
                fh = logging.FileHandler(log_file, encoding="utf-8")
                fh.setFormatter(logging.Formatter("%(message)s"))
                file_logger.addHandler(fh)

            self.file_logger = structlog.wrap_logger(
                file_logger,
                processors=[
                    structlog.processors.TimeStamper(fmt="iso"),
                    structlog.stdlib.add_log_level,
                    structlog.processors.StackInfoRenderer(),
                    structlog.processors.format_exc_info,
                    add_caller,
                    structlog.processors.UnicodeDecoder(),
                    structlog.processors.JSONRenderer(default=str),
                ],
                wrapper_class=structlog.stdlib.BoundLogger,
            ).bind(logger=name, **self.context)

        self._logger_cache[name] = self

    # ----------------------------
    # Logging methods
    # ----------------------------
    def _log(self, method: str, msg: str, extra: Optional[Dict[str, Any]] = None, **kwargs: Any):
        fields = {**(extra or {}), **kwargs}
        getattr(self.console_logger, method)(msg, **fields)
        if self.file_logger is not None:
            getattr(self.file_logger, method)(msg, **fields)

    def debug(self, msg: str, extra: Optional[Dict[str, Any]] = None, **kwargs: Any):
        self._log("debug", msg, extra, **kwargs)

    def info(self, msg: str, extra: Optional[Dict[str, Any]] = None, **kwargs: Any):
        self._log("info", msg, extra, **kwargs)

    def warning(self, msg: str, extra: Optional[Dict[str, Any]] = None, **kwargs: Any):
        self._log("warning", msg, extra, **kwargs)

    def error(self, msg: str, extra: Optional[Dict[str, Any]] = None, **kwargs: Any):
        self._log("error", msg, extra, **kwargs)

    def critical(self, msg: str, extra: Optional[Dict[str, Any]] = None, **kwargs: Any):
        self._log("critical", msg, extra, **kwargs)

    def exception(self, msg: str, extra: Optional[Dict[str, Any]] = None, **kwargs: Any):
        self._log("exception", msg, extra, **kwargs)
