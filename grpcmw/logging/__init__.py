"""Logging middleware for gRPC-style calls."""