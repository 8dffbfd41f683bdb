"""
Pure domain layer.

Clock abstraction and JSON value rules, with NO dependencies on:
- The document store
- The filesystem
- Services or the HTTP layer
"""
