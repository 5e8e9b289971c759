"""
Application Layer - Use cases built on the domain entities.

Contains:
- search: Query encoding, the reactive search pipeline and its session
"""
