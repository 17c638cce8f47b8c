"""Feature slices of the rageshake service."""
