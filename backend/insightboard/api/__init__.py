"""HTTP API for Insightboard."""
