"""Product API: authenticated product catalogue over FastAPI and SQLAlchemy."""

__version__ = "1.0.0"
