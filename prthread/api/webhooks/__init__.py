"""GitHub webhook resources.

Usage
-----
Import the webhook resource for route registration::

    from prthread.api.webhooks.resources import WebhookResource
"""
