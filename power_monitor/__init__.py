"""Live monitoring dashboard for an IoT power-metering device."""

__all__ = ["io", "telemetry", "history", "chart", "gui"]
__version__ = "0.1.0"
