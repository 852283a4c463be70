"""Configuration, logging, storage, errors and middleware."""
