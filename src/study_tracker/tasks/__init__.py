"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter, LoadStatus) and JSON codec
- task_store.py: in-memory ordered list + sync with the chosen backend
- local_backend.py: key-value slot persistence (local variant)
- remote_backend.py: REST persistence keyed by the session user id (remote variant)
"""
