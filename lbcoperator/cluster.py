"""Discovery of the cluster's name, region and VPC at operator start-up."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping

from lbcoperator.aws import AWSError, VPCClient, get_vpc_id

CLUSTER_INFRASTRUCTURE_NAME = "cluster"
# Freshly provisioned credentials may not be usable straight away,
# so the first AWS call is repeated until it succeeds or times out.
AWS_REQUEST_TIMEOUT = 20.0
AWS_REQUEST_POLL_INTERVAL = 1.0

_log = logging.getLogger("setup")


class ClusterInfoError(Exception):
    """Raised when the cluster's details cannot be determined."""


@dataclass(frozen=True)
class ClusterInfo:
    """The cluster's infrastructure name and AWS region."""

    cluster_name: str
    aws_region: str


def cluster_info(infrastructure: Mapping[str, Any] | None) -> ClusterInfo:
    """Extract the cluster name and AWS region from an Infrastructure resource."""
    message = f'could not get AWS region from Infrastructure "{CLUSTER_INFRASTRUCTURE_NAME}" status'
    status = (infrastructure or {}).get("status") or {}
    cluster_name = status.get("infrastructureName") or ""
    if not cluster_name:
        raise ClusterInfoError(message)
    platform_status = status.get("platformStatus") or {}
    aws_status = platform_status.get("aws") or {}
    region = aws_status.get("region") or ""
    if not region:
        raise ClusterInfoError(message)
    return ClusterInfo(cluster_name=cluster_name, aws_region=region)


def poll_vpc_id(
    client: VPCClient,
    cluster_name: str,
    timeout: float = AWS_REQUEST_TIMEOUT,
    poll_interval: float = AWS_REQUEST_POLL_INTERVAL,
) -> str:
    """Look up the cluster's VPC ID once per interval until it succeeds or the timeout passes."""
    deadline = time.monotonic() + timeout
    while True:
        time.sleep(poll_interval)
        if time.monotonic() >= deadline:
            raise ClusterInfoError("timed out trying to get vpc id")
        try:
            return get_vpc_id(client, cluster_name)
        except AWSError as exc:
            _log.info("failed to get VPC ID: %s", exc)