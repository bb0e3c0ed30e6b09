"""
Funnel Backend

A FastAPI backend for the Funnel content digest.
Provides RSS ingestion, LLM enrichment, and the weekly article feed.
"""

__version__ = "1.0.0"
