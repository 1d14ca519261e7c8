"""
Logging configuration for MemberRoot.

Provides centralized structured logging setup with JSON output for production
and human-readable output for development. Supports correlation IDs so that a
registrar can tie a membership change to the root it later publishes.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from structlog.types import EventDict


# Context variable for correlation ID
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add correlation ID to log events if present in context.

    Args:
        logger: Logger instance
        method_name: Name of the logging method
        event_dict: Event dictionary to modify

    Returns:
        Modified event dictionary with correlation_id if available
    """
    correlation_id = correlation_id_var.get()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Set correlation ID for the current context.

    Args:
        correlation_id: Optional correlation ID. If None, generates a new UUID.

    Returns:
        The correlation ID that was set
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    correlation_id_var.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    """Clear correlation ID from the current context."""
    correlation_id_var.set(None)


def get_correlation_id() -> Optional[str]:
    """
    Get the current correlation ID from context.

    Returns:
        Current correlation ID or None if not set
    """
    return correlation_id_var.get()


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    json_format: bool = True,
) -> None:
    """
    Configure structured logging for MemberRoot.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to log file. If None, logs only to stderr.
        json_format: If True, use JSON format. If False, use human-readable format.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(file_handler)
    else:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(numeric_level)
        stderr_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(stderr_handler)

    processors: list = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_correlation_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def setup_logging_from_config(config: Any) -> None:
    """
    Configure logging from the ``logging`` section of a loaded configuration.

    Args:
        config: MemberRootConfig instance
    """
    log_file = Path(config.logging.file) if config.logging.file else None
    setup_logging(
        level=config.logging.level,
        log_file=log_file,
        json_format=config.logging.json_format,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance for a specific module.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        Structured logger instance.
    """
    if not name.startswith("memberroot"):
        name = f"memberroot.{name}"
    return structlog.get_logger(name)


# Convenience functions for common logging patterns

def log_tree_rebuild(
    logger: structlog.stdlib.BoundLogger,
    leaf_count: int,
    depth: int,
    merkle_root: str,
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """
    Log a full tree rebuild.

    Args:
        logger: Logger instance
        leaf_count: Number of raw members in the leaf set
        depth: Depth of the rebuilt tree (length of every inclusion proof)
        merkle_root: Computed root (hex encoded)
        duration_ms: Rebuild duration in milliseconds
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "tree_rebuild",
        "leaf_count": leaf_count,
        "depth": depth,
        "merkle_root": merkle_root,
        "duration_ms": duration_ms,
    }

    log_data.update(kwargs)

    logger.debug("tree_rebuild", **log_data)


def log_leaf_mutation(
    logger: structlog.stdlib.BoundLogger,
    operation: str,
    identifier: str,
    leaf_count: int,
    merkle_root: str,
    **kwargs: Any,
) -> None:
    """
    Log a membership change.

    The registrar must publish ``merkle_root`` after every mutation, so it is
    always part of the event.

    Args:
        logger: Logger instance
        operation: Mutation performed ("add" or "remove")
        identifier: Identifier added or removed (hex encoded)
        leaf_count: Number of members after the mutation
        merkle_root: Root after the mutation (hex encoded)
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "leaf_mutation",
        "operation": operation,
        "identifier": identifier,
        "leaf_count": leaf_count,
        "merkle_root": merkle_root,
    }

    log_data.update(kwargs)

    logger.info("leaf_mutation", **log_data)


def log_proof_verification(
    logger: structlog.stdlib.BoundLogger,
    proof_type: str,
    identifier: str,
    success: bool,
    failure_reason: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """
    Log a proof verification.

    Args:
        logger: Logger instance
        proof_type: "inclusion" or "exclusion"
        identifier: Identifier the proof is about (hex encoded)
        success: Whether the proof verified
        failure_reason: Reason for failure if not successful
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "proof_verification",
        "proof_type": proof_type,
        "identifier": identifier,
        "success": success,
    }

    if failure_reason is not None:
        log_data["failure_reason"] = failure_reason

    log_data.update(kwargs)

    if success:
        logger.debug("proof_verification", **log_data)
    else:
        logger.info("proof_verification_failed", **log_data)
