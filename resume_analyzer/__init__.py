"""Resume rendering and AI feedback pipeline."""
