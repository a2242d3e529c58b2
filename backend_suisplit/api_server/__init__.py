"""
API server package — HTTP interface for the dashboard.

Relays JSON-RPC queries to a Sui full node, serves aggregated dashboard
views and normalizes errors to a single {"error": message} shape.
"""
