"""Core engine: hashing, registry, resolver, orchestrator, lifecycle driver."""
