"""Resource models, IAM policy tooling, credentials requests and cluster discovery for an AWS load balancer controller."""

__version__ = "1.1.0"