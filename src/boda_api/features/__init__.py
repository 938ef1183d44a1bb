"""Feature slices (router / service / repository / schemas per domain)."""
