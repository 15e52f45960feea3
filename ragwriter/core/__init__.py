"""
Core layer: configuration, failure types and chat history persistence.
"""
