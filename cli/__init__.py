"""CLI package for Copilot Interceptor

Runs the proxy server and manages stored credentials.
"""
