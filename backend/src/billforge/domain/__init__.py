"""
Domain package - Billing model, monetary formatting and error taxonomy.

This package holds the typed billing configuration tree and the pure
helpers that operate on it. It performs no I/O.
"""
