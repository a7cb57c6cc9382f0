"""
Scripts ejecutables (matching one-shot y servidor HTTP).
"""
