"""Middleware for gRPC-style calls: contexts, status codes, interceptor chaining, auth and logging."""

__version__ = "0.1.0"