"""
models/ - Domain Models
=======================
Plain dataclasses mirroring the store's rows, plus the in-memory
aggregate and date types built on top of them.
"""
