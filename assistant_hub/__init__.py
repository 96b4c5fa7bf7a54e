"""Assistant Hub: multi-assistant knowledge base chat service."""
