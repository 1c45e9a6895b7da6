"""Infrastructure layer — graph store, alterations, scopes, NetworkX engine.

This layer depends on the domain layer, stdlib, and NetworkX.
It must never import from services, commands, or output.
"""
