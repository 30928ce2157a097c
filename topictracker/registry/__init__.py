"""
Store Module.

Owners of the language and topic collections.
Enforce title uniqueness and the topic -> language reference.
"""
