"""Adapters connecting the core to HTTP, XML, storage and logging."""
