"""
Trello MCP - Trello boards, lists and cards as Model Context Protocol tools.

Core pieces:
- resilience: Dual key/token rate limiter and bounded 429 retry
- integrations.trello: Async Trello REST client
- watch: Poll-based change detection ("wait until the board changes")
- tools: MCP-aligned tool classes and registry
- server: stdio protocol server
"""

__version__ = "0.1.0"
