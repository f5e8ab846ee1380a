"""
Infrastructure Package
======================

Technical adapters shared by bounded contexts (database engine/session).
"""
