"""Building blocks for a Kubernetes cloud management service: models, data access, audit, cipher and helpers."""

__version__ = "0.1.0"