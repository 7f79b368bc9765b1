"""Core: configuration, capabilities wiring, lifespan, error mapping, rate limits."""
