"""Configuration, logging, error taxonomy and database helpers."""
