"""Carpark tracker: ingestion and aggregation of the parking log sheet."""

from .cli import main as cli_main
from .ingest import IngestionResult, IngestionStats, SheetIngestor, ingest_rows, run_ingestion
from .refresh import RefreshController, RefreshScheduler
from .transform import build_dashboard_views

__all__ = [
    "cli_main",
    "IngestionResult",
    "IngestionStats",
    "SheetIngestor",
    "ingest_rows",
    "run_ingestion",
    "RefreshController",
    "RefreshScheduler",
    "build_dashboard_views",
]
