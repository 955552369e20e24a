from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ..model import ReportDocument


class ReportWriter(ABC):
    """Renders a ReportDocument into a file on disk."""

    extension: str = ""
    mimetype: str = "application/octet-stream"

    @abstractmethod
    def write(self, document: ReportDocument, path: Path) -> Path:
        raise NotImplementedError
