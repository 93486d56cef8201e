"""
                Sabor & Arte Storefront API

Order-taking backend for the Sabor & Arte restaurant storefront:
customer accounts, the categorized menu, and cart checkouts
recorded as orders.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
