"""Centralized feature decision logging for the conversion pipeline.

These helpers log heuristic decisions and error policies for debugging and
troubleshooting. User-facing progress goes through ``ProgressReporter``.
"""

from __future__ import annotations

import logging
from typing import Any

from html2react.model.options import ConversionOptions

logger = logging.getLogger(__name__)


def log_conversion_configuration(options: ConversionOptions) -> None:
    """Log the effective conversion configuration.

    Args:
        options: Merged conversion options to log
    """
    logger.info("Conversion configuration:")
    for key, value in options.to_dict().items():
        if value is not None:
            logger.info("  %s: %s", key, value)


def log_feature_decision(
    feature: str, decision: str, context: dict[str, Any] | None = None
) -> None:
    """Log a feature processing decision.

    Args:
        feature: Name of the feature making the decision
        decision: The decision made (e.g., "enabled", "skipped", "fallback")
        context: Optional context information
    """
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        logger.info("%s: %s (%s)", feature, decision, context_str)
    else:
        logger.info("%s: %s", feature, decision)


def log_error_policy(
    feature: str, error_type: str, action: str, details: str | None = None
) -> None:
    """Log error handling policy decisions.

    Args:
        feature: Name of the feature encountering the error
        error_type: Type of error (e.g., "download_failed", "format_failed")
        action: Action taken (e.g., "skip", "identity", "continue")
        details: Optional additional details
    """
    if details:
        logger.warning("%s error policy: %s -> %s (%s)", feature, error_type, action, details)
    else:
        logger.warning("%s error policy: %s -> %s", feature, error_type, action)


__all__ = [
    "log_conversion_configuration",
    "log_error_policy",
    "log_feature_decision",
]
