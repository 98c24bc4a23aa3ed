"""
Application Layer

Contains the client-side stores and use cases. This layer orchestrates the
flow of data between the cart, the order history and the remote order
store.
"""
