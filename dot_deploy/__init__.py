"""dot-deploy GitHub Action: registers deploys with the dot-deploy service."""

__version__ = "0.3.0"
