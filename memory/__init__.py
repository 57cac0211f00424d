"""In-memory application state."""
