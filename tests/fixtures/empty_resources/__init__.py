"""A namespace whose modules register no resources."""
