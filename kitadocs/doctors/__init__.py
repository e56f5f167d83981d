"""
Doctor module.

This module provides doctor registration with credential documents,
login gated on verification status, and the verification workflow.
"""
