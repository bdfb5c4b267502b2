"""Domain layer — slugs, front-matter boundaries, field builders, errors.

This layer depends only on stdlib and ruamel.yaml.
It must never import from services, infrastructure, commands, or config.
"""
