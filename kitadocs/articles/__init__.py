"""
Articles published by verified doctors, with likes and bookmarks.
"""
