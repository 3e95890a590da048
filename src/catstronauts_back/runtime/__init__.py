"""
Runtime support for the BFF: configuration and logging.
"""
