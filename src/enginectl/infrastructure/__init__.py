"""Infrastructure layer — registry file storage and ssh connection setup.

This layer depends on stdlib, domain models, and third-party libs (ruamel.yaml).
It must never import from services, commands, or output.
"""
