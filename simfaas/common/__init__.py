"""
Shared configuration and logging.
"""
