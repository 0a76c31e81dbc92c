"""CrushConfessions: anonymous campus confessions with mutual reveals and chat."""

__version__ = "1.0.0"
