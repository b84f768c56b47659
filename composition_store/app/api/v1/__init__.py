"""Version 1 of the Composition Store API."""
