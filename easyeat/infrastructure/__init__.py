"""
Infrastructure Layer

Configuration, logging, persistence and identity adapters behind the
interfaces the domain layer defines.
"""
