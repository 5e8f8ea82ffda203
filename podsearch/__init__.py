"""PODSEARCH: podcast search front-end backed by a write-once results store."""
