"""Logging setup for push_dispatcher (delegates to shared)."""

from shared.log import JsonFormatter, setup_logging as _setup

__all__ = ["JsonFormatter", "setup_logging"]

_NOISY_LOGGERS = ["google", "urllib3", "grpc", "celery", "kombu"]


def setup_logging(level: str = "INFO", service: str = "push_dispatcher") -> None:
    _setup(level, suppress=_NOISY_LOGGERS, service=service)
