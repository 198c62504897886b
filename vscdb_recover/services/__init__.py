"""
Services built on top of the extraction pipeline (extraction, export, search).
"""
