"""
api/ - Query/Mutation Contract
==============================
Transport-free query and mutation roots that reshape SleepManager results
into the shapes a presentation layer exposes.
"""
