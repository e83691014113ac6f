"""
Core utilities for Harvester.

This module contains shared utilities used across all components:
- Run configuration
- Structured logging
- Error journal and error record models
- Exception hierarchy
"""

from harvester.core.logging import get_logger, setup_logging, init_harvest_logging, run_logger
from harvester.core.config import HarvestConfig
from harvester.core.error_logger import ErrorLogger
from harvester.core.error_models import (
    ErrorComponent,
    ErrorSeverity,
    ErrorType,
    ErrorStage,
    ErrorRecord,
)
from harvester.core.exceptions import (
    HarvestError,
    ConfigurationError,
    SessionAcquisitionError,
    NavigationError,
    DetailPageError,
    RunDeadlineExceeded,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "init_harvest_logging",
    "run_logger",
    "HarvestConfig",
    "ErrorLogger",
    "ErrorComponent",
    "ErrorSeverity",
    "ErrorType",
    "ErrorStage",
    "ErrorRecord",
    "HarvestError",
    "ConfigurationError",
    "SessionAcquisitionError",
    "NavigationError",
    "DetailPageError",
    "RunDeadlineExceeded",
]
