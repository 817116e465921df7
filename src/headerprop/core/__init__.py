"""Configuration, exceptions, protocols and shared types."""
