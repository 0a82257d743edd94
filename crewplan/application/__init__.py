"""
Application Layer

Coordinates the domain services with configuration and observability.
Holds no business rules of its own.
"""
