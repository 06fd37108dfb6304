"""Service layer — command dispatch core returning envelopes.

Services may import from domain and infrastructure layers.
They must never import from commands, output, or mcp.
"""
