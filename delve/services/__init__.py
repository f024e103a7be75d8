"""Stateless roll services (spawns, traps)."""
