"""
Persistence adapters.

These modules encapsulate how data is stored/retrieved (JSON file, SQL table
or process memory). Services depend on the key/value storage interface and on
the record store rather than touching a backend directly.
"""
