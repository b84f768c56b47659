"""Core building blocks: configuration, logging, storage and identity."""
