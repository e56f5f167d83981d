"""
Queued email notifications with retry.
"""
