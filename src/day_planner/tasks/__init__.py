"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, Category, TaskCollection) and date keys
- task_store.py: in-memory collection with a single commit step
- task_lifecycle.py: status transitions, relocations and reordering
"""
