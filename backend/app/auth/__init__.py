"""Token authentication for the API."""
