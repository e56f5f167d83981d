"""
Reader accounts.

This module provides registration, login, profile lookup and password reset for users.
"""
