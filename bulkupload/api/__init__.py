"""Platform REST API client and response decoding."""
