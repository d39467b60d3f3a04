"""Service layer — the paperdoll store, returning ServiceResult.

Services may import from domain and plugins.
They must never import from commands or output.
"""
