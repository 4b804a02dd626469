"""Domain layer — struct extraction, tag grammar, rules and range lookup.

This layer depends only on stdlib and pydantic.
It must never import from services, commands, output, or config.
"""
