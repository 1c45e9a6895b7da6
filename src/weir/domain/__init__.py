"""Domain layer — vectors, edges, attribute values, and errors.

This layer depends only on the standard library and numpy.
It must never import from infrastructure, services, commands, or config.
"""
