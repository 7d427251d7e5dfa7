"""Application layer: the live pipeline and server-side services."""
