"""Estate Dashboard API: real-estate back office with dashboard reporting."""
