"""HTTP API: application factory, dependencies and operational routes."""
