"""
Presentation Layer - Result presenters and entry points.

Contains:
- cli: Console client and ConsolePresenter
"""
