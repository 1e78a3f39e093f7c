"""Core package: configuration, exceptions and the control-plane client."""
