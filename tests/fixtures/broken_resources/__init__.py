"""A namespace containing a module that cannot be imported."""
