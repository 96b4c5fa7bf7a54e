"""
Boundary layer for external system integrations.

Handles all interactions with external systems (the relational database and the remote answering service).
Provides adapters and clients for infrastructure dependencies.
"""
