"""HTTP surface over a single deployed pool."""
