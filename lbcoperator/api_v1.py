"""Types of the networking.olm.openshift.io/v1 API group, the conversion hub."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with one of its versions."""

    group: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}/{self.version}"


GROUP_VERSION = GroupVersion(group="networking.olm.openshift.io", version="v1")
KIND = "AWSLoadBalancerController"
LIST_KIND = "AWSLoadBalancerControllerList"

DEFAULT_INGRESS_CLASS = "alb"
DEFAULT_REPLICAS = 1
MAX_ADDITIONAL_RESOURCE_TAGS = 24
MAX_TAG_KEY_LENGTH = 128
MAX_TAG_VALUE_LENGTH = 256

_TAG_KEY_PATTERN = re.compile(r"[0-9A-Za-z_.:/=+-@]+")
_TAG_VALUE_PATTERN = re.compile(r"[0-9A-Za-z_.:/=+-@]*")
_STS_ROLE_ARN_PATTERN = re.compile(r"arn:(aws|aws-cn|aws-us-gov):iam::[0-9]{12}:role/.*")


class AWSAddon(str, Enum):
    """AWS services that can be integrated with the load balancers."""

    SHIELD = "AWSShield"
    WAF_V1 = "AWSWAFv1"
    WAF_V2 = "AWSWAFv2"


class SubnetTaggingPolicy(str, Enum):
    """How the subnets used by the load balancers get their role tags."""

    AUTO = "Auto"
    MANUAL = "Manual"


def _omit_empty(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None and value != "" and value != 0
            and value != [] and value != {}}


@dataclass
class ObjectMeta:
    """The subset of object metadata the operator works with."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    generation: int = 0
    resource_version: str = ""
    deletion_timestamp: str | None = None


def _meta_to_dict(meta: ObjectMeta) -> dict[str, Any]:
    return _omit_empty({
        "name": meta.name,
        "namespace": meta.namespace,
        "labels": dict(meta.labels),
        "annotations": dict(meta.annotations),
        "generation": meta.generation,
        "resourceVersion": meta.resource_version,
        "deletionTimestamp": meta.deletion_timestamp,
    })


def _meta_from_dict(data: dict[str, Any]) -> ObjectMeta:
    return ObjectMeta(
        name=data.get("name", ""),
        namespace=data.get("namespace", ""),
        labels=dict(data.get("labels") or {}),
        annotations=dict(data.get("annotations") or {}),
        generation=int(data.get("generation", 0)),
        resource_version=data.get("resourceVersion", ""),
        deletion_timestamp=data.get("deletionTimestamp"),
    )


@dataclass
class Condition:
    """A status condition of a resource."""

    type: str
    status: str
    reason: str = ""
    message: str = ""
    last_transition_time: str = ""
    observed_generation: int = 0


def _condition_to_dict(condition: Condition) -> dict[str, Any]:
    data: dict[str, Any] = {
        "type": condition.type,
        "status": condition.status,
        "lastTransitionTime": condition.last_transition_time,
        "reason": condition.reason,
        "message": condition.message,
    }
    if condition.observed_generation:
        data["observedGeneration"] = condition.observed_generation
    return data


def _condition_from_dict(data: dict[str, Any]) -> Condition:
    return Condition(
        type=data["type"],
        status=data["status"],
        reason=data.get("reason", ""),
        message=data.get("message", ""),
        last_transition_time=data.get("lastTransitionTime", ""),
        observed_generation=int(data.get("observedGeneration", 0)),
    )


@dataclass
class SecretNameReference:
    """A reference to a secret in the operator namespace."""

    name: str


@dataclass
class AWSResourceTag:
    """A tag applied to the AWS resources created by the controller."""

    key: str
    value: str = ""

    def validate(self) -> None:
        """Raise ValueError if the key or value breaks the tagging conventions."""
        if not self.key:
            raise ValueError("tag key must not be empty")
        if len(self.key) > MAX_TAG_KEY_LENGTH:
            raise ValueError(f"tag key {self.key!r} is longer than {MAX_TAG_KEY_LENGTH} characters")
        if not _TAG_KEY_PATTERN.fullmatch(self.key):
            raise ValueError(f"tag key {self.key!r} contains invalid characters")
        if len(self.value) > MAX_TAG_VALUE_LENGTH:
            raise ValueError(f"tag value {self.value!r} is longer than {MAX_TAG_VALUE_LENGTH} characters")
        if not _TAG_VALUE_PATTERN.fullmatch(self.value):
            raise ValueError(f"tag value {self.value!r} contains invalid characters")


@dataclass
class AWSLoadBalancerDeploymentConfig:
    """Customisation of the controller's deployment."""

    replicas: int = DEFAULT_REPLICAS


@dataclass
class AWSLoadBalancerCredentialsRequestConfig:
    """Customisation of the controller's CredentialsRequest."""

    sts_iam_role_arn: str = ""

    def validate(self) -> None:
        """Raise ValueError if the STS role ARN is set but malformed."""
        if self.sts_iam_role_arn and not _STS_ROLE_ARN_PATTERN.fullmatch(self.sts_iam_role_arn):
            raise ValueError(f"invalid STS IAM role ARN {self.sts_iam_role_arn!r}")


@dataclass
class AWSLoadBalancerControllerSpec:
    """Desired state of an AWSLoadBalancerController."""

    subnet_tagging: SubnetTaggingPolicy = SubnetTaggingPolicy.AUTO
    additional_resource_tags: list[AWSResourceTag] = field(default_factory=list)
    ingress_class: str = DEFAULT_INGRESS_CLASS
    config: AWSLoadBalancerDeploymentConfig | None = None
    enabled_addons: list[AWSAddon] = field(default_factory=list)
    credentials: SecretNameReference | None = None
    credentials_request_config: AWSLoadBalancerCredentialsRequestConfig | None = None

    def __post_init__(self) -> None:
        self.subnet_tagging = SubnetTaggingPolicy(self.subnet_tagging)
        self.enabled_addons = [AWSAddon(addon) for addon in self.enabled_addons]

    def validate(self) -> None:
        """Raise ValueError if the spec breaks any of the API's constraints."""
        if len(self.additional_resource_tags) > MAX_ADDITIONAL_RESOURCE_TAGS:
            raise ValueError(
                f"at most {MAX_ADDITIONAL_RESOURCE_TAGS} additional resource tags are allowed, "
                f"got {len(self.additional_resource_tags)}"
            )
        seen: set[str] = set()
        for tag in self.additional_resource_tags:
            tag.validate()
            if tag.key in seen:
                raise ValueError(f"duplicate additional resource tag key {tag.key!r}")
            seen.add(tag.key)
        if self.config is not None and self.config.replicas < 1:
            raise ValueError(f"replicas must be at least 1, got {self.config.replicas}")
        if self.credentials_request_config is not None:
            self.credentials_request_config.validate()
        if self.credentials is not None and self.credentials_request_config is not None:
            raise ValueError("credentialsRequestConfig has no effect if credentials is provided")


def _spec_to_dict(spec: AWSLoadBalancerControllerSpec) -> dict[str, Any]:
    return _omit_empty({
        "subnetTagging": spec.subnet_tagging.value,
        "additionalResourceTags": [{"key": tag.key, "value": tag.value} for tag in spec.additional_resource_tags],
        "ingressClass": spec.ingress_class,
        "config": _omit_empty({"replicas": spec.config.replicas}) if spec.config is not None else None,
        "enabledAddons": [addon.value for addon in spec.enabled_addons],
        "credentials": {"name": spec.credentials.name} if spec.credentials is not None else None,
        "credentialsRequestConfig": (
            _omit_empty({"stsIAMRoleARN": spec.credentials_request_config.sts_iam_role_arn})
            if spec.credentials_request_config is not None else None
        ),
    }) | ({"config": {}} if spec.config is not None and not spec.config.replicas else {})


def _spec_from_dict(data: dict[str, Any]) -> AWSLoadBalancerControllerSpec:
    config_data = data.get("config")
    credentials_data = data.get("credentials")
    cr_config_data = data.get("credentialsRequestConfig")
    return AWSLoadBalancerControllerSpec(
        subnet_tagging=SubnetTaggingPolicy(data.get("subnetTagging") or SubnetTaggingPolicy.AUTO),
        additional_resource_tags=[
            AWSResourceTag(key=item["key"], value=item.get("value", ""))
            for item in data.get("additionalResourceTags") or []
        ],
        ingress_class=data.get("ingressClass") or DEFAULT_INGRESS_CLASS,
        config=(
            AWSLoadBalancerDeploymentConfig(replicas=int(config_data.get("replicas") or DEFAULT_REPLICAS))
            if config_data is not None else None
        ),
        enabled_addons=[AWSAddon(addon) for addon in data.get("enabledAddons") or []],
        credentials=SecretNameReference(name=credentials_data["name"]) if credentials_data is not None else None,
        credentials_request_config=(
            AWSLoadBalancerCredentialsRequestConfig(sts_iam_role_arn=cr_config_data.get("stsIAMRoleARN", ""))
            if cr_config_data is not None else None
        ),
    )


@dataclass
class AWSLoadBalancerControllerStatusSubnets:
    """Cluster subnets that matter for the controller."""

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


def _status_to_dict(status: AWSLoadBalancerControllerStatus) -> dict[str, Any]:
    subnets = None
    if status.subnets is not None:
        subnets = _omit_empty({
            "subnetTagging": status.subnets.subnet_tagging.value if status.subnets.subnet_tagging else None,
            "internal": list(status.subnets.internal),
            "public": list(status.subnets.public),
            "tagged": list(status.subnets.tagged),
            "untagged": list(status.subnets.untagged),
        })
    data = _omit_empty({
        "conditions": [_condition_to_dict(condition) for condition in status.conditions],
        "observedGeneration": status.observed_generation,
        "ingressClass": status.ingress_class,
    })
    if subnets is not None:
        data["subnets"] = subnets
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
    """An AWSLoadBalancerController resource in its storage version."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: AWSLoadBalancerControllerSpec = field(default_factory=AWSLoadBalancerControllerSpec)
    status: AWSLoadBalancerControllerStatus = field(default_factory=AWSLoadBalancerControllerStatus)
    api_version: str = str(GROUP_VERSION)
    kind: str = KIND

    def hub(self) -> GroupVersion:
        """Return the group version that other versions convert through."""
        return GROUP_VERSION

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
    """A list of AWSLoadBalancerController resources."""

    items: list[AWSLoadBalancerController] = field(default_factory=list)
    api_version: str = str(GROUP_VERSION)
    kind: str = LIST_KIND