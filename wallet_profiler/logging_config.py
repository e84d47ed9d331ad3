"""
Structured logging configuration using structlog.

JSON lines by default, colored console output at DEBUG. Configured API
keys are redacted from every event down to a short prefix.
"""

import logging
import sys
from typing import Any, Dict, Iterable, List, Optional

import structlog

from .config import settings

QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx", "redis")


def mask_secret(value: str, visible: int = 3) -> str:
    """Show only the first few characters of an API key."""
    if not value:
        return "Not set"
    return f"{value[:visible]}..."


def _configured_secrets() -> List[str]:
    return [s for s in (settings.zapper_api_key, settings.coingecko_api_key) if s]


def redact_secrets(secrets: Iterable[str]):
    """Build a processor replacing secret values in string fields."""
    secrets = [s for s in secrets if s]

    def processor(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        if not secrets:
            return event_dict
        for key, value in event_dict.items():
            if isinstance(value, str):
                for secret in secrets:
                    if secret in value:
                        value = value.replace(secret, mask_secret(secret))
                event_dict[key] = value
        return event_dict

    return processor


def setup_logging(log_level: Optional[str] = None) -> None:
    """Route structlog and stdlib logging through one formatter.

    Args:
        log_level: Override log level (default: from settings.log_level)
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)

    pre_chain: List[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if level == logging.DEBUG:
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    else:
        pre_chain.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # stdlib records also carry their `extra=` fields
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[*pre_chain, structlog.stdlib.ExtraAdder()],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            redact_secrets(_configured_secrets()),
            renderer,
        ],
    ))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
