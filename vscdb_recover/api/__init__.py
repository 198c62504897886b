"""
HTTP API for uploading databases and retrieving recovered conversations.
"""
