"""Catalog records and ingest."""
