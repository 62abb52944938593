"""
Pydantic models exchanged with the HTTP layer.
"""
