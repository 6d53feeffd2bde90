"""
Structured logging for the catalog API using structlog.
Provides JSON or console output and an auth event logger.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None,
    debug: bool = False
) -> None:
    """
    Set up structured logging with configurable output formats.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Add call-site information to every event
    """
    level = getattr(logging, log_level.upper())

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    processors: List = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter('%(message)s'))
        logging.getLogger().addHandler(file_handler)

    get_logger(__name__).info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def mask_email(email: Optional[str]) -> Optional[str]:
    """Keep the domain and first character of the local part."""
    if not email or "@" not in email:
        return email
    local, domain = email.split("@", 1)
    return f"{local[:1]}***@{domain}"


class AuthEventLogger:
    """
    Logger for authentication events with bound context.
    Never receives passwords, hashes or tokens.
    """

    def __init__(self, name: str = "auth"):
        self.logger = structlog.get_logger(name)
        self.context = {}

    def bind_context(self, **kwargs) -> 'AuthEventLogger':
        """
        Bind context variables to the logger.

        Args:
            **kwargs: Context variables to bind

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self

    def clear_context(self) -> 'AuthEventLogger':
        """Clear all context variables."""
        self.context.clear()
        return self

    def log_signup_success(self, email: str, user_id: str) -> None:
        self.logger.info(
            "Auth event",
            event_type="signup_success",
            email=mask_email(email),
            user_id=user_id,
            **self.context
        )

    def log_signup_failure(self, email: Optional[str], reason: str, **extra) -> None:
        self.logger.warning(
            "Auth event",
            event_type="signup_failure",
            email=mask_email(email),
            reason=reason,
            **extra,
            **self.context
        )

    def log_login_success(self, email: str, user_id: str) -> None:
        self.logger.info(
            "Auth event",
            event_type="login_success",
            email=mask_email(email),
            user_id=user_id,
            **self.context
        )

    def log_login_failure(self, email: Optional[str]) -> None:
        self.logger.warning(
            "Auth event",
            event_type="login_failure",
            email=mask_email(email),
            **self.context
        )

    def log_access_denied(self, reason: str, **extra) -> None:
        self.logger.warning(
            "Auth event",
            event_type="access_denied",
            reason=reason,
            **extra,
            **self.context
        )
