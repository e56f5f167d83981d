"""
LLM-generated assessment forms for doctors.
"""
