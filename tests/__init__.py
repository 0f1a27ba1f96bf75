"""
Test Package

Run with: pytest tests/ -v

No test talks to the network: MCP tool calls are replaced by fake tool
callers and the Gemini chat model by fake objects with an ``invoke`` method.
"""
