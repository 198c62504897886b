"""
Core models, decoding, ordering and configuration.
"""
