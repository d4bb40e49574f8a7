"""Abilities: weather lookup and message formatting."""
