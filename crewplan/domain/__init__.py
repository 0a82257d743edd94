"""
Domain Layer

Business concepts and rules of crew scheduling, independent of the HTTP
surface and of configuration.

Components:
- scheduling/: Assignments, occupied timelines and placement windows
- shared/: Base classes and exceptions shared across subdomains
"""
