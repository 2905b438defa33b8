"""Sofiya bilingual command-understanding service"""

__version__ = "1.0.0"
