"""Infrastructure layer — document discovery, reads, atomic writes.

This layer depends only on stdlib and the domain error types.
The service layer bridges between domain logic and file I/O.
"""
