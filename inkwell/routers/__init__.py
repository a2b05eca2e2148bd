"""Server-rendered HTML routes."""
