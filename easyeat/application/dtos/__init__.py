"""
Data Transfer Objects
"""
