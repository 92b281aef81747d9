"""Core client, transformation and validation logic."""
