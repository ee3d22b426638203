"""Configuration — TOML discovery, settings sources, logging setup."""
