"""Flask request layer for the catalog."""
