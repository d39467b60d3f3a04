"""Infrastructure layer — a reference catalog, catalog loading, and image I/O.

The store only depends on the Catalog protocol from the domain layer.
Everything here is one concrete collaborator behind that protocol.
"""
