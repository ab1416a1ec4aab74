"""A namespace with exactly one resource exposing one read operation."""
