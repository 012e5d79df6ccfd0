"""Application layer - session management use cases."""
