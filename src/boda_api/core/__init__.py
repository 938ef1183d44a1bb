"""Framework-level building blocks: security primitives, auth, HTTP dependencies."""
