"""
Catstronauts BFF - GraphQL aggregation layer over the Track REST API.
"""

__version__ = "0.1.0"
