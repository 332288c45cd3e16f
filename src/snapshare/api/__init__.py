"""HTTP API for SnapShare."""
