"""CSV input parsing and CSV output writers."""
