"""Application workflows that combine parsing with runtime services."""
