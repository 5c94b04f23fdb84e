"""Upload orchestration services."""
