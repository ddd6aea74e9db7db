"""Ingestion layer.

This package turns telemetry pushed by the monitoring hardware into
updates of the shared dashboard document.
"""

from linewatch.ingestion.apply import IngestionReport, apply_readings, apply_readings_by_key, ingest_payload
from linewatch.ingestion.normalize import ReadingBatch, extract_point_entries, normalize_readings

__all__ = [
    "IngestionReport",
    "ReadingBatch",
    "apply_readings",
    "apply_readings_by_key",
    "extract_point_entries",
    "ingest_payload",
    "normalize_readings",
]
