"""
AI client side.

- prompts.py: categorization / suggestion prompt builders
- parsing.py: lenient JSON extraction from free-text model replies
- client.py: ProxyTransport (httpx) that talks to the proxy endpoint
- service.py: AIService, the never-raising categorize/suggest facade
"""
