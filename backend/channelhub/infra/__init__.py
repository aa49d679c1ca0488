"""Adapters implementing the service-layer ports (JWT, media host, uploads)."""
