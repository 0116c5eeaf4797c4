# framedeck/core/__init__.py

"""Storage, API, client and editor internals for framedeck."""
