"""Domain layer — types, fields, context, rules, callbacks.

This layer depends only on stdlib, pydantic and servicekit.errors.
It must never import from services, jobs, infrastructure, commands, or config.
"""
