"""Core library types: metadata records, snapshots, providers and logging."""
