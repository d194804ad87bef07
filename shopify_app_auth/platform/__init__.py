"""
Cross-cutting plumbing: request/response adapters, signed cookies and
secret redaction for logs.
"""
