"""
services/ - Aggregate Layer
===========================
Composes repository calls into domain-level operations and owns the
failure policy across multi-step operations.
"""
