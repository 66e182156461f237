"""Application services built on top of the library metadata."""
