"""
Core layer.

Components:
- ports.py: Protocols the rest of the app depends on (storage, transports, upstream)
- state.py: AppState, the application state holder
- todo.py: orchestration (optimistic submit, background categorization, suggestions)
"""
