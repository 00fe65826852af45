"""HTTP layer.

- orchestrator.py: service layer over the store, the enrichment boundary and the engine
- server.py: Flask routes
"""
