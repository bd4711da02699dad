"""Race domain services: metrics and the passage corpus.

Pure logic with no Flask or Socket.IO imports, shared by the room models,
the session handler and the HTTP wrappers.
"""
