"""Chest and item rolls."""
