"""kube-dump: snapshot every object of a Kubernetes cluster onto the filesystem."""

__version__ = "0.1.0"
