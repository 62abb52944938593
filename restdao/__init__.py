"""
restdao: generic DAO and paged collection links for resource-oriented APIs.
"""

__version__ = "0.1.0"
