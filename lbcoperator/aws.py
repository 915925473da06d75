"""Queries against the EC2 API used to locate the cluster's VPC."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

CLUSTER_TAG_KEY_PREFIX = "kubernetes.io/cluster/"
TAG_KEY_FILTER_NAME = "tag-key"


class AWSError(Exception):
    """Raised when an AWS query fails or returns an unusable answer."""


@dataclass(frozen=True)
class Filter:
    """A filter on an EC2 describe call."""

    name: str
    values: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Vpc:
    """A VPC as returned by the EC2 API."""

    vpc_id: str | None = None


class VPCClient(Protocol):
    """Anything that can list VPCs matching a set of filters."""

    def describe_vpcs(self, filters: list[Filter]) -> list[Vpc]:
        ...


def cluster_tag_key(cluster_name: str) -> str:
    """Return the tag key that marks resources belonging to the cluster."""
    return f"{CLUSTER_TAG_KEY_PREFIX}{cluster_name}"


def get_vpc_id(client: VPCClient, cluster_name: str) -> str:
    """Return the ID of the single VPC tagged as belonging to the cluster."""
    tag_key = cluster_tag_key(cluster_name)
    try:
        vpcs = client.describe_vpcs(filters=[Filter(name=TAG_KEY_FILTER_NAME, values=[tag_key])])
    except Exception as exc:
        raise AWSError(f'failed to list VPC with tag "{tag_key}": {exc}') from exc
    if not vpcs:
        raise AWSError(f'no VPC with tag "{tag_key}" found')
    if len(vpcs) > 1:
        raise AWSError(f'multiple VPCs with tag "{tag_key}" found')
    return vpcs[0].vpc_id or ""