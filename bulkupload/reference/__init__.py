"""Static reference data used by row validation."""
