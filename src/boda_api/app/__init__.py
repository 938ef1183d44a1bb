"""Application wiring: lifespan and per-request service factories."""
