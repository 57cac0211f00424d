"""Persistence backends and external service clients."""
