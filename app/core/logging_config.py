# app/core/logging_config.py
import logging
import re
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

class SensitiveDataFilter(logging.Filter):
    """Masks credentials in log messages, e.g. the PSI key embedded in request URLs."""

    PATTERNS = [
        (re.compile(r"((?:api[_-]?)?key\s*[=:]\s*)[^\s&'\"]+", re.IGNORECASE), r"\1***MASKED***"),
        (re.compile(r"(token\s*[=:]\s*)[^\s&'\"]+", re.IGNORECASE), r"\1***MASKED***"),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self.mask(str(record.msg))
        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._mask_arg(v) for k, v in record.args.items()}
            else:
                record.args = tuple(self._mask_arg(arg) for arg in record.args)
        return True

    def _mask_arg(self, value):
        if isinstance(value, (str, Exception)):
            return self.mask(str(value))
        return value

    @classmethod
    def mask(cls, text: str) -> str:
        for pattern, replacement in cls.PATTERNS:
            text = pattern.sub(replacement, text)
        return text

def setup_logging(level: str = "INFO") -> None:
    """Configures the root logger once; calling it again only updates the level."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    if any(getattr(h, "_searchpilot", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(SensitiveDataFilter())
    handler._searchpilot = True
    root.addHandler(handler)

    # httpx logs every request URL at INFO, key included
    logging.getLogger("httpx").setLevel(logging.WARNING)

def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
