"""
Error logging to a local JSONL journal.

This module provides a fail-safe error logger that:
- Validates records with the ErrorRecord pydantic model
- Appends one JSON object per line under <log_dir>/errors/
- Mirrors every record to the standard logger
- Never raises: logging an error must not fail a harvest
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any, List

from harvester.core.logging import get_logger
from harvester.core.error_models import (
    ErrorRecord,
    ErrorComponent,
    ErrorSeverity,
    ErrorType,
)

logger = get_logger(__name__)


class ErrorLogger:
    """
    Error journal for one harvest run.

    Usage:
        >>> from harvester.core.error_models import ErrorStage
        >>> errors = ErrorLogger(Path("logs"), run_id="3f2c...")
        >>> errors.log_error(
        ...     component=ErrorComponent.GATE,
        ...     stage=ErrorStage.AWAIT_CHALLENGE,
        ...     error_type=ErrorType.CHALLENGE_PENDING,
        ...     domain="www.ibba.org",
        ...     message="Challenge still present after 180000ms",
        ...     severity=ErrorSeverity.WARNING,
        ... )
    """

    def __init__(self, log_dir: Path, run_id: Optional[str] = None):
        self._dir = Path(log_dir) / "errors"
        self.run_id = run_id
        self.records: List[ErrorRecord] = []

    @property
    def path(self) -> Path:
        """Path of today's journal file."""
        return self._dir / f"errors_{datetime.now().strftime('%Y%m%d')}.jsonl"

    def log_error(
        self,
        component: ErrorComponent,
        stage: str,
        error_type: ErrorType,
        domain: str,
        message: str,
        url: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Record an error described by its fields.

        Returns:
            True if the record was written, False otherwise
        """
        try:
            record = ErrorRecord(
                component=component,
                stage=stage,
                error_type=error_type,
                severity=severity,
                domain=domain,
                url=url,
                run_id=self.run_id,
                message=message,
                metadata=metadata or {},
            )
            return self._write(record)
        except Exception as e:
            logger.error(f"Error logger failed: {e} - Original error: {message}")
            return False

    def log_exception(
        self,
        exc: BaseException,
        component: ErrorComponent,
        stage: str,
        domain: str,
        url: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        error_type: Optional[ErrorType] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Record an exception with automatic classification.

        Returns:
            True if the record was written, False otherwise
        """
        try:
            record = ErrorRecord.from_exception(
                exc=exc,
                component=component,
                stage=stage,
                domain=domain,
                url=url,
                run_id=self.run_id,
                severity=severity,
                error_type=error_type,
                metadata=metadata,
            )
            return self._write(record)
        except Exception as e:
            logger.error(f"Error logger failed: {e} - Original exception: {exc}")
            return False

    def _write(self, record: ErrorRecord) -> bool:
        self.records.append(record)
        logger.log(
            logging.getLevelName(record.severity.upper()),
            f"[{record.component}/{record.stage}] {record.error_type}: {record.message}",
        )
        try:
            self._dir.mkdir(exist_ok=True, parents=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(json.dumps(record.model_dump(), ensure_ascii=False) + "\n")
            return True
        except OSError as e:
            logger.error(f"Could not write error journal {self.path}: {e}")
            return False
