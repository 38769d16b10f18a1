"""
Core layer - domain model, ports and exceptions. No I/O lives here.
"""
