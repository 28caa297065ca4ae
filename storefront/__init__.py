"""Storefront service: catalog, cart and checkout REST API."""
