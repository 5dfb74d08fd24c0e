"""CineMatch: movie recommendations from stated tastes."""
