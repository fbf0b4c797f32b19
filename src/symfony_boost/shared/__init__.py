"""Configuration, logging and error types shared across the server and tools."""
