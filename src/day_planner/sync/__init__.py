"""
Remote backup subsystem.

Components:
- errors.py: failure taxonomy surfaced to callers
- credentials.py: bearer token + cached document id slots
- gist_client.py: async HTTP client for the gist API
- merge.py: additive, local-authoritative merge
- sync_engine.py: locate / fetch / publish and the sync, pull, push flows
"""
