"""Types of the networking.olm.openshift.io/v1alpha1 API group and their conversion to the hub."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from lbcoperator import api_v1
from lbcoperator.api_v1 import (
    Condition,
    GroupVersion,
    ObjectMeta,
    _condition_from_dict,
    _condition_to_dict,
    _meta_from_dict,
    _meta_to_dict,
    _omit_empty,
)

GROUP_VERSION = GroupVersion(group="networking.olm.openshift.io", version="v1alpha1")
KIND = "AWSLoadBalancerController"
LIST_KIND = "AWSLoadBalancerControllerList"

DEFAULT_INGRESS_CLASS = "alb"
DEFAULT_REPLICAS = 2


class AWSAddon(str, Enum):
    """AWS services that can be integrated with the load balancers."""

    SHIELD = "AWSShield"
    WAF_V1 = "AWSWAFv1"
    WAF_V2 = "AWSWAFv2"


class SubnetTaggingPolicy(str, Enum):
    """How the subnets used by the load balancers get their role tags."""

    AUTO = "Auto"
    MANUAL = "Manual"


@dataclass
class SecretReference:
    """A reference to a secret in the operator namespace."""

    name: str


@dataclass
class AWSLoadBalancerDeploymentConfig:
    """Customisation of the controller's deployment."""

    replicas: int = DEFAULT_REPLICAS


@dataclass
class AWSLoadBalancerControllerSpec:
    """Desired state of an AWSLoadBalancerController."""

    subnet_tagging: SubnetTaggingPolicy = SubnetTaggingPolicy.AUTO
    additional_resource_tags: dict[str, str] = field(default_factory=dict)
    ingress_class: str = DEFAULT_INGRESS_CLASS
    config: AWSLoadBalancerDeploymentConfig | None = None
    enabled_addons: list[AWSAddon] = field(default_factory=list)
    credentials: SecretReference | None = None

    def __post_init__(self) -> None:
        self.subnet_tagging = SubnetTaggingPolicy(self.subnet_tagging)
        self.enabled_addons = [AWSAddon(addon) for addon in self.enabled_addons]


@dataclass
class AWSLoadBalancerControllerStatusSubnets:
    """Subnets of the cluster as seen by the operator."""

    subnet_tagging: SubnetTaggingPolicy | None = None
    internal: list[str] = field(default_factory=list)
    public: list[str] = field(default_factory=list)
    tagged: list[str] = field(default_factory=list)
    untagged: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.subnet_tagging is not None:
            self.subnet_tagging = SubnetTaggingPolicy(self.subnet_tagging)


@dataclass
class AWSLoadBalancerControllerStatus:
    """Observed state of an AWSLoadBalancerController."""

    conditions: list[Condition] = field(default_factory=list)
    observed_generation: int = 0
    subnets: AWSLoadBalancerControllerStatusSubnets | None = None
    ingress_class: str = ""


def _spec_to_dict(spec: AWSLoadBalancerControllerSpec) -> dict[str, Any]:
    data = _omit_empty({
        "subnetTagging": spec.subnet_tagging.value,
        "additionalResourceTags": dict(spec.additional_resource_tags),
        "ingressClass": spec.ingress_class,
        "enabledAddons": [addon.value for addon in spec.enabled_addons],
        "credentials": {"name": spec.credentials.name} if spec.credentials is not None else None,
    })
    if spec.config is not None:
        data["config"] = _omit_empty({"replicas": spec.config.replicas})
    return data


def _spec_from_dict(data: dict[str, Any]) -> AWSLoadBalancerControllerSpec:
    config_data = data.get("config")
    credentials_data = data.get("credentials")
    return AWSLoadBalancerControllerSpec(
        subnet_tagging=SubnetTaggingPolicy(data.get("subnetTagging") or SubnetTaggingPolicy.AUTO),
        additional_resource_tags=dict(data.get("additionalResourceTags") or {}),
        ingress_class=data.get("ingressClass") or DEFAULT_INGRESS_CLASS,
        config=(
            AWSLoadBalancerDeploymentConfig(replicas=int(config_data.get("replicas") or DEFAULT_REPLICAS))
            if config_data is not None else None
        ),
        enabled_addons=[AWSAddon(addon) for addon in data.get("enabledAddons") or []],
        credentials=SecretReference(name=credentials_data["name"]) if credentials_data is not None else None,
    )


def _status_to_dict(status: AWSLoadBalancerControllerStatus) -> dict[str, Any]:
    data = _omit_empty({
        "conditions": [_condition_to_dict(condition) for condition in status.conditions],
        "observedGeneration": status.observed_generation,
        "ingressClass": status.ingress_class,
    })
    if status.subnets is not None:
        subnets = status.subnets
        data["subnets"] = _omit_empty({
            "subnetTagging": subnets.subnet_tagging.value if subnets.subnet_tagging else None,
            "internal": list(subnets.internal),
            "public": list(subnets.public),
            "tagged": list(subnets.tagged),
            "untagged": list(subnets.untagged),
        })
    return data


def _status_from_dict(data: dict[str, Any]) -> AWSLoadBalancerControllerStatus:
    subnets_data = data.get("subnets")
    subnets = None
    if subnets_data is not None:
        subnets = AWSLoadBalancerControllerStatusSubnets(
            subnet_tagging=subnets_data.get("subnetTagging") or None,
            internal=list(subnets_data.get("internal") or []),
            public=list(subnets_data.get("public") or []),
            tagged=list(subnets_data.get("tagged") or []),
            untagged=list(subnets_data.get("untagged") or []),
        )
    return AWSLoadBalancerControllerStatus(
        conditions=[_condition_from_dict(item) for item in data.get("conditions") or []],
        observed_generation=int(data.get("observedGeneration", 0)),
        subnets=subnets,
        ingress_class=data.get("ingressClass", ""),
    )


@dataclass
class AWSLoadBalancerController:
    """An AWSLoadBalancerController resource in the v1alpha1 version."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: AWSLoadBalancerControllerSpec = field(default_factory=AWSLoadBalancerControllerSpec)
    status: AWSLoadBalancerControllerStatus = field(default_factory=AWSLoadBalancerControllerStatus)
    api_version: str = str(GROUP_VERSION)
    kind: str = KIND

    def convert_to(self) -> api_v1.AWSLoadBalancerController:
        """Return this resource converted to the hub version (v1)."""
        spec = self.spec
        hub_spec = api_v1.AWSLoadBalancerControllerSpec(
            subnet_tagging=api_v1.SubnetTaggingPolicy(spec.subnet_tagging.value),
            additional_resource_tags=[
                api_v1.AWSResourceTag(key=key, value=value)
                for key, value in spec.additional_resource_tags.items()
            ],
            ingress_class=spec.ingress_class,
            config=(
                api_v1.AWSLoadBalancerDeploymentConfig(replicas=spec.config.replicas)
                if spec.config is not None else None
            ),
            enabled_addons=[api_v1.AWSAddon(addon.value) for addon in spec.enabled_addons],
            credentials=(
                api_v1.SecretNameReference(name=spec.credentials.name)
                if spec.credentials is not None else None
            ),
        )
        status = self.status
        hub_subnets = None
        if status.subnets is not None:
            subnets = status.subnets
            hub_subnets = api_v1.AWSLoadBalancerControllerStatusSubnets(
                subnet_tagging=(
                    api_v1.SubnetTaggingPolicy(subnets.subnet_tagging.value)
                    if subnets.subnet_tagging is not None else None
                ),
                internal=list(subnets.internal),
                public=list(subnets.public),
                tagged=list(subnets.tagged),
                untagged=list(subnets.untagged),
            )
        hub_status = api_v1.AWSLoadBalancerControllerStatus(
            conditions=copy.deepcopy(status.conditions),
            observed_generation=status.observed_generation,
            subnets=hub_subnets,
            ingress_class=status.ingress_class,
        )
        return api_v1.AWSLoadBalancerController(
            metadata=copy.deepcopy(self.metadata),
            spec=hub_spec,
            status=hub_status,
        )

    @classmethod
    def convert_from(cls, hub: api_v1.AWSLoadBalancerController) -> AWSLoadBalancerController:
        """Build a v1alpha1 resource from the hub version (v1).

        The credentials request configuration has no place in this version and is dropped.
        """
        spec = hub.spec
        alpha_spec = AWSLoadBalancerControllerSpec(
            subnet_tagging=SubnetTaggingPolicy(spec.subnet_tagging.value),
            additional_resource_tags={tag.key: tag.value for tag in spec.additional_resource_tags},
            ingress_class=spec.ingress_class,
            config=(
                AWSLoadBalancerDeploymentConfig(replicas=spec.config.replicas)
                if spec.config is not None else None
            ),
            enabled_addons=[AWSAddon(addon.value) for addon in spec.enabled_addons],
            credentials=SecretReference(name=spec.credentials.name) if spec.credentials is not None else None,
        )
        status = hub.status
        alpha_subnets = None
        if status.subnets is not None:
            subnets = status.subnets
            alpha_subnets = AWSLoadBalancerControllerStatusSubnets(
                subnet_tagging=(
                    SubnetTaggingPolicy(subnets.subnet_tagging.value)
                    if subnets.subnet_tagging is not None else None
                ),
                internal=list(subnets.internal),
                public=list(subnets.public),
                tagged=list(subnets.tagged),
                untagged=list(subnets.untagged),
            )
        alpha_status = AWSLoadBalancerControllerStatus(
            conditions=copy.deepcopy(status.conditions),
            observed_generation=status.observed_generation,
            subnets=alpha_subnets,
            ingress_class=status.ingress_class,
        )
        return cls(metadata=copy.deepcopy(hub.metadata), spec=alpha_spec, status=alpha_status)

    def to_dict(self) -> dict[str, Any]:
        """Return the resource as its JSON-compatible representation."""
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": _meta_to_dict(self.metadata),
            "spec": _spec_to_dict(self.spec),
            "status": _status_to_dict(self.status),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AWSLoadBalancerController:
        """Build a resource from its JSON-compatible representation, applying defaults."""
        return cls(
            metadata=_meta_from_dict(data.get("metadata") or {}),
            spec=_spec_from_dict(data.get("spec") or {}),
            status=_status_from_dict(data.get("status") or {}),
            api_version=data.get("apiVersion") or str(GROUP_VERSION),
            kind=data.get("kind") or KIND,
        )


@dataclass
class AWSLoadBalancerControllerList:
    """A list of v1alpha1 AWSLoadBalancerController resources."""

    items: list[AWSLoadBalancerController] = field(default_factory=list)
    api_version: str = str(GROUP_VERSION)
    kind: str = LIST_KIND