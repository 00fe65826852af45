"""Boundary to the external company-enrichment and research service."""
