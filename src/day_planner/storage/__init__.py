"""
Local persistence.

- kv_store.py: SQLite-backed named string slots
- persistence.py: TaskCollection <-> JSON slot mirror
"""
