"""
Key-value storage backends.

- kv.py: JsonFileStorage (on-disk, atomic writes) and InMemoryStorage (tests)
"""
