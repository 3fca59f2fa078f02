"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Profile, CategorizationResult, ...)
- task_store.py: TaskList, ProfileStore and CredentialStore over a KeyValueStorage
- profile.py: pure edit helpers used by the profile edit session
"""
