"""
HTTP routes exposing DAO-backed collections.
"""
