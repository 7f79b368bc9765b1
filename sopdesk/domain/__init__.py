"""Domain layer: enums, exceptions and the resolved caller identity."""
