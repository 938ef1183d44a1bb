"""Payment provider integration: per-wedding config, checkout gateway, webhooks."""
