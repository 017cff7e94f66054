"""Core domain logic package.

This package contains pure business logic for org chart operations.
Modules here must not import GUI frameworks (PySide6, Qt, etc.).
"""
