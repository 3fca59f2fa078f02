"""
Smart Todo: personal task manager with AI categorization and suggestions.

Subpackages:
- tasks: task/profile models and the stores that persist them
- storage: key-value storage backends (JSON file, in-memory)
- llm: prompt building, reply parsing and the proxy-facing AI client
- proxy: the credential-forwarding relay to the upstream Messages API
- core: ports (interfaces) and application orchestration
- cli / connectors: console entry point and REPL
"""

__version__ = "0.1.0"
