"""
Shared infrastructure: security, auth dependencies, storage, mail, LLM client and middleware.
"""
