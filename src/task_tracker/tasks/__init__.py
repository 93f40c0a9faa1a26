"""
Task subsystem.

Components:
- task_ids.py: id generator
- task_models.py: data structures (Task, TaskFields, TaskSnapshot, enums)
- task_validation.py: field rules for create/update input
- slot_stores.py: key/value slot backends (SQLite, JSON file, memory)
- task_storage.py: persistence gateway (whole collection in one slot)
- task_store.py: in-memory controller (mutations, filters, stats, selection)
- task_api.py: form boundary helpers used by the front-ends
"""
