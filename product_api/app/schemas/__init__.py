"""
Pydantic schema definitions for API payloads and stored records.

Request and response shapes are kept apart from the immutable records
held by the repository so the wire format can format dates with the
configured layout without touching storage.
"""
