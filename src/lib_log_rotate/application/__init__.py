"""Application layer: ports shared by the logger and its adapters."""
