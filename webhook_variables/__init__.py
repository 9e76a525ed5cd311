"""Core logic for the Webhook Variable Resolver.

The Gradio playground lives in `app.py`. This package contains functions that:
- model extraction rules (JSONPath, XPath, StringPart)
- evaluate rules against JSON, XML and chat-text payloads
- flatten results into string build variables
- suggest rules from sample payloads
"""
