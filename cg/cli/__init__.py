"""Command line interface for CG."""
