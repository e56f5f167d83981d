"""
Administrator accounts and notification job management.
"""
