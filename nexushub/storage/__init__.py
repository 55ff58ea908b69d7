"""Local persistence layer for nexushub."""
