"""
Logging utilities for the education agent orchestrator.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from ..models.config import LoggingConfig

ROOT_LOGGER_NAME = "edu_orchestrator"


def setup_logging(config: LoggingConfig) -> None:
    """
    Set up logging configuration for the system.

    Args:
        config: Logging configuration settings
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(config.level)

    # Clear any existing handlers
    root_logger.handlers.clear()

    formatter = logging.Formatter(config.format)

    if config.enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(config.level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # File handler with rotation
    if config.enable_file and config.file_path:
        file_path = Path(config.file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=config.file_path,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(config.level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance under the package logger
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class AgentLogger:
    """
    Structured logger for routing decisions, fallbacks and request summaries.
    """

    def __init__(self, name: str = "agents"):
        self.logger = get_logger(name)

    def log_routing_decision(self, agent_type: str, reason: str, user_id: str) -> None:
        self.logger.info(
            f"Routing request from {user_id} to {agent_type} ({reason})",
            extra={
                "event_type": "routing_decision",
                "agent_type": agent_type,
                "reason": reason,
                "user_id": user_id,
            }
        )

    def log_fallback(self, agent_type: str, original_provider: str, fallback_provider: str, reason: str) -> None:
        self.logger.warning(
            f"Fallback triggered for {agent_type}: {original_provider} -> {fallback_provider}",
            extra={
                "event_type": "fallback",
                "agent_type": agent_type,
                "original_provider": original_provider,
                "fallback_provider": fallback_provider,
                "reason": reason,
            }
        )

    def log_degraded(self, agent_type: str, attempted_providers: list, reason: str) -> None:
        self.logger.error(
            f"Returning degraded response for {agent_type} after trying {attempted_providers}",
            extra={
                "event_type": "degraded_response",
                "agent_type": agent_type,
                "attempted_providers": attempted_providers,
                "reason": reason,
            }
        )

    def log_request(self, agent_type: str, user_id: str, summary: dict) -> None:
        self.logger.info(
            f"Agent request served: {agent_type}",
            extra={
                "event_type": "agent_request",
                "agent_type": agent_type,
                "user_id": user_id,
                "data": summary,
            }
        )

    def log_error(self, error: Exception, context: Optional[dict] = None) -> None:
        """Log an error with optional context."""
        self.logger.error(
            f"Error occurred: {str(error)}",
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "context": context or {}
            },
            exc_info=error
        )
