"""
HTTP middleware: request logging and error handlers.
"""
