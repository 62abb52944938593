"""
Database engine setup.
"""
