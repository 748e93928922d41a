"""Batch ingestion driver."""

from typelit.ingest.orchestrator import IngestOrchestrator, IngestReport
from typelit.ingest.progress import IngestProgressTracker

__all__ = [
    "IngestOrchestrator",
    "IngestProgressTracker",
    "IngestReport",
]
