"""Field normalization, row validation and upload profiles."""
