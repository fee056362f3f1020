"""
sleeplog
========
Personal sleep-tracking data layer: nights, tags, comments and the
aggregate views built from them, persisted in a single SQLite file.
"""
