"""Catalog app: feature containers and the demo entry point."""
