"""
EasyEat ordering core

Cart, order history and chef order queue for the EasyEat food-ordering app.
"""

__version__ = "1.0.0"
