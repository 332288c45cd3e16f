"""Service layer for SnapShare."""
