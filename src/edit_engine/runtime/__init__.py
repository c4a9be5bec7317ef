"""Runtime services (telemetry) shared by every engine component."""
