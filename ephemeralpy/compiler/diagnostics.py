"""Diagnostics for marker calls the pass had to leave alone."""

import logging
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    filename: str
    lineno: int
    col_offset: int
    kind: str
    message: str

    def format(self) -> str:
        return f"{self.filename} - {self.lineno}:{self.col_offset} {self.message}"

    def __str__(self) -> str:
        return self.format()


class DiagnosticReporter:
    """Collects diagnostics for one run and logs each one as it arrives."""

    def __init__(self, filename: str):
        self.filename = filename
        self.diagnostics: List[Diagnostic] = []

    def report(self, lineno: int, col_offset: int, kind: str, message: str) -> Diagnostic:
        diagnostic = Diagnostic(self.filename, lineno, col_offset, kind, message)
        self.diagnostics.append(diagnostic)
        logger.error("%s", diagnostic.format())
        return diagnostic

    def __len__(self) -> int:
        return len(self.diagnostics)
