"""Infrastructure layer — the Proxmox VE HTTP client.

This layer depends on stdlib and third-party libs (httpx, structlog).
It may import the failure taxonomy from domain, and nothing else above it.
"""
