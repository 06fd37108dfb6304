"""pvectl — command dispatch and action routing for the Proxmox VE API."""

__version__ = "0.1.0"
