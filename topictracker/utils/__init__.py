"""
Utility modules for TopicTracker.

Cross-cutting concerns:
- Storage: JSON-backed persistent map
- Result: Success/Failure return values
"""
