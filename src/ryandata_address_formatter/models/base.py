"""Pydantic base model with a built-in process log.

Every mutation the formatting pipeline applies to an address (sanitizing,
country overrides, replace rules, derived codes) is recorded here so callers
can see why the rendered text differs from their input.
"""

from __future__ import annotations

from typing import Any

from abstract_validation_base import ProcessEntry, ProcessLog
from pydantic import BaseModel, ConfigDict, Field

__all__ = ["TrackedModel"]


class TrackedModel(BaseModel):
    """Base model with process logging for cleaning and errors.

    All models inheriting from this class automatically get:
    - process_log: ProcessLog field (excluded from serialization)
    - add_error(): Log a non-fatal problem
    - add_cleaning_process(): Log a cleaning/transformation operation
    - audit_log(): Export combined entries for DataFrame analysis
    """

    model_config = ConfigDict(
        # Subclasses can override this
        extra="ignore",
    )

    process_log: ProcessLog = Field(default_factory=ProcessLog, exclude=True)

    def add_error(
        self,
        field: str,
        message: str,
        value: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Log a non-fatal problem found while processing a field.

        Args:
            field: Name of the field with the problem.
            message: Description of the issue.
            value: The problematic value (optional).
            context: Additional context dict (optional).
        """
        entry = ProcessEntry(
            entry_type="error",
            field=field,
            message=message,
            original_value=str(value) if value is not None else None,
            context=context or {},
        )
        self.process_log.errors.append(entry)

    def add_cleaning_process(
        self,
        field: str,
        original_value: Any,
        new_value: Any,
        reason: str,
        operation_type: str = "cleaning",
    ) -> None:
        """Log a cleaning/transformation operation.

        Args:
            field: Name of the field that was changed.
            original_value: The value before transformation.
            new_value: The value after transformation (None if removed).
            reason: Explanation of why the change was made.
            operation_type: Category of operation (cleaning, preformat, ...).
        """
        entry = ProcessEntry(
            entry_type="cleaning",
            field=field,
            message=reason,
            original_value=str(original_value) if original_value is not None else None,
            new_value=str(new_value) if new_value is not None else None,
            context={"operation_type": operation_type},
        )
        self.process_log.cleaning.append(entry)

    def audit_log(self, source: str | None = None) -> list[dict[str, Any]]:
        """Export combined cleaning and error entries.

        Args:
            source: Optional source identifier to add to each entry.

        Returns:
            List of dicts suitable for pd.DataFrame(), sorted by timestamp.
        """
        entries: list[dict[str, Any]] = []
        for entry in [*self.process_log.cleaning, *self.process_log.errors]:
            d = entry.model_dump()
            if source:
                d["source"] = source
            entries.append(d)
        return sorted(entries, key=lambda x: str(x.get("timestamp", "")))
