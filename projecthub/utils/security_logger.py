"""
Security event logger

Logs security-related events (login attempts, role changes, denied actions,
destructive deletes) to the console and to a rotating file.
"""

import logging
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from projecthub.config.security import SecurityConfig

_LOG_FORMAT = "%(asctime)s [%(levelname)s]: %(message)s"

security_logger = logging.getLogger("projecthub.security")


def configure_security_logger(log_path: Optional[str] = None) -> logging.Logger:
    """Attach the rotating file handler once; safe to call repeatedly"""
    if security_logger.handlers:
        return security_logger

    security_logger.setLevel(logging.INFO)
    path = log_path or SecurityConfig.get_security_log_path()
    handler = RotatingFileHandler(
        path,
        maxBytes=SecurityConfig.MONITORING['max_log_size'],
        backupCount=SecurityConfig.MONITORING['log_backup_count'],
    )
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    security_logger.addHandler(handler)
    return security_logger


def _format_metadata(metadata: dict) -> str:
    return " ".join(f"{key}={value}" for key, value in sorted(metadata.items()))


def log_security_event(event_type: str, status: str, level: int = logging.INFO, **metadata: Any) -> None:
    """Log a security event such as a login attempt or a role change"""
    if not SecurityConfig.MONITORING['log_security_events']:
        return
    details = _format_metadata(metadata)
    security_logger.log(level, f"Security event: {event_type} status={status} {details}".rstrip())


def log_login_attempt(email: str, success: bool, reason: Optional[str] = None) -> None:
    log_security_event(
        "login_attempt",
        "success" if success else "failure",
        level=logging.INFO if success else logging.WARNING,
        email=email,
        reason=reason or "-",
    )


def log_access_denied(user_id: int, role: str, action: str, entity_kind: str, entity_id: Any = None) -> None:
    log_security_event(
        "access_denied",
        "failure",
        level=logging.WARNING,
        user_id=user_id,
        role=role,
        action=action,
        entity=entity_kind,
        entity_id=entity_id if entity_id is not None else "-",
    )


def log_role_change(actor_id: int, user_id: int, old_role: str, new_role: str) -> None:
    log_security_event(
        "role_change",
        "success",
        actor_id=actor_id,
        user_id=user_id,
        old_role=old_role,
        new_role=new_role,
    )
