"""Infrastructure layer - framework and platform adapters."""
