"""Top-level package for Django configuration.

Contains the settings modules for each environment, the root URL
configuration and the WSGI/ASGI entry points.
"""
