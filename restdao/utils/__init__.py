"""
Pagination, links, configuration and logging helpers.
"""
