"""Demo runners for the position solver."""
