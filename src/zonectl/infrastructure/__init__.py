"""Infrastructure layer — snapshot storage, batched retrieval, graph view.

This layer depends on stdlib, third-party libs (pydantic, NetworkX), and
the domain models it loads (dependency direction: infrastructure -> domain).
It must never import from services, commands, or output.
"""
