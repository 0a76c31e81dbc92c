"""HTTP API package for CrushConfessions."""
