"""Liveness and readiness probe resources.

Usage
-----
Import health resources for route registration::

    from prthread.api.health.resources import HealthResource, ReadyResource
"""
