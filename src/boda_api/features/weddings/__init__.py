"""Wedding records owned by organiser accounts."""
