"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL queries for a single table.
Repositories receive raw rows from the store and return domain model objects.
No repository joins tables or knows about aggregates.
"""
