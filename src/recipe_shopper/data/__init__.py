"""
Data models and storage.
"""
