"""Diagnostic logging package."""

from billed.diagnostics.logger import DiagnosticLogger, configure_logging
from billed.diagnostics.sinks import DiagnosticSinkInterface, MemoryDiagnosticSink

__all__ = [
    "DiagnosticLogger",
    "DiagnosticSinkInterface",
    "MemoryDiagnosticSink",
    "configure_logging",
]
