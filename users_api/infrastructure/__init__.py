"""Infrastructure layer - database, auth, security, middleware and telemetry."""
