"""Service layer — service objects, the call orchestrator, and Outcome.

Services may import from the domain layer, and from jobs only lazily (``call_later``).
They must never import from commands or output.
"""
