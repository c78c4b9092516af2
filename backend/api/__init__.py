"""ModelRoute REST API."""
