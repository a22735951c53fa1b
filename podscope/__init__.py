"""podscope: resolve Kubernetes resource references to the pods they select."""

__version__ = "0.1.0"
