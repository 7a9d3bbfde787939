"""Pydantic schemas for the ledger, reports and GST."""
