"""Domain layer — skills, lifecycle rules, reputation arithmetic, errors.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
