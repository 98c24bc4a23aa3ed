"""
Shared utilities: constants and exceptions
"""
