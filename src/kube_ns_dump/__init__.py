"""Per-namespace YAML snapshots of Kubernetes cluster objects."""

__version__ = "0.1.0"
