"""Parse, build and print PDDL planning domains and problem instances."""

__version__ = "0.1.0"
__all__ = ["__version__"]