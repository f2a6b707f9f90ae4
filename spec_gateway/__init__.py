"""
Spec Gateway
Serves per-service OpenAPI specs and proxies requests to the backends they describe
"""

__version__ = "1.0.0"
