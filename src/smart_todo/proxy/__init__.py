"""
Proxy endpoint.

- errors.py: ProxyError taxonomy and its JSON shape
- handler.py: transport-agnostic request handler
- upstream.py: Anthropic Messages API binding
- server.py: FastAPI binding + uvicorn entry point
"""
