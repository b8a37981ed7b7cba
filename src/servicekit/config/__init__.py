"""Configuration — settings, config discovery, logging."""
