"""Configuration, logging, reporting and result types."""
