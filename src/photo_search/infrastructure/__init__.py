"""
Infrastructure Layer - External API adapters.

Contains:
- http: Shared async HTTP client base
- sources: Concrete search gateways (Pixabay)
"""
