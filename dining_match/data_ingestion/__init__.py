"""
Seed data ingestion.

Responsibilities:
- Read the packaged restaurant CSV.
- Normalize it into the canonical Restaurant schema.
- Hand the validated records to a fresh store on startup.
"""
