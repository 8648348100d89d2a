"""Bootstrap wiring: builds services from configuration."""
