"""
Service layer.

Pure business rules that do not need the HTTP layer or the storage,
such as payload validation, live here.
"""
