"""Backup outcome and artifact models."""

from datetime import datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel


class BackupArtifact(BaseModel):
    """A backup file on disk."""

    path: Path
    size: int                   # bytes
    modified_at: datetime

    @property
    def name(self) -> str:
        return self.path.name


class BackupOutcome(BaseModel):
    """Result of one orchestrator invocation (exactly one action)."""

    action: Literal["restored", "exported", "no_backup"]
    artifact: Path | None = None
    row_count: int = 0
    probe_failed: bool = False   # fail-open downgrade was applied

    @property
    def message(self) -> str:
        """Human-readable summary line."""
        if self.action == "restored":
            return f"Database restored successfully from backup: {self.artifact}"
        if self.action == "exported":
            return f"Backup created: {self.artifact}"
        return "No backup found. Starting with empty database."
