"""Building the CredentialsRequest that provisions the controller's AWS credentials."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Any, Iterable

from lbcoperator.api_v1 import AWSLoadBalancerCredentialsRequestConfig, ObjectMeta, _meta_to_dict
from lbcoperator.iampolicy import PolicyStatement

CREDENTIALS_REQUEST_NAMESPACE = "openshift-cloud-credential-operator"
CONTROLLER_RESOURCE_PREFIX = "aws-load-balancer-controller"
CLOUD_CREDENTIAL_API_VERSION = "cloudcredential.openshift.io/v1"
CREDENTIALS_REQUEST_KIND = "CredentialsRequest"
AWS_PROVIDER_SPEC_KIND = "AWSProviderSpec"
BOUND_SA_TOKEN_DIR = "/var/run/secrets/openshift/serviceaccount"


@dataclass(frozen=True)
class NamespacedName:
    """The name of a resource together with its namespace."""

    name: str
    namespace: str = ""

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass
class ObjectReference:
    """A reference to another resource by name and namespace."""

    name: str
    namespace: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.namespace:
            data["namespace"] = self.namespace
        if self.name:
            data["name"] = self.name
        return data


def _statement_entry(statement: PolicyStatement) -> dict[str, Any]:
    if len(statement.resource) > 1:
        raise ValueError(
            f"a statement entry takes a single resource, got {len(statement.resource)}: {statement.resource!r}"
        )
    entry: dict[str, Any] = {
        "effect": statement.effect,
        "action": list(statement.action),
        "resource": statement.resource[0] if statement.resource else "",
    }
    if statement.condition:
        entry["policyCondition"] = {key: dict(value) for key, value in statement.condition.items()}
    return entry


@dataclass
class AWSProviderSpec:
    """The AWS part of a CredentialsRequest: the permissions being requested."""

    statement_entries: list[PolicyStatement] = field(default_factory=list)
    sts_iam_role_arn: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the provider spec in its encoded form."""
        data: dict[str, Any] = {
            "apiVersion": CLOUD_CREDENTIAL_API_VERSION,
            "kind": AWS_PROVIDER_SPEC_KIND,
            "statementEntries": [_statement_entry(statement) for statement in self.statement_entries],
        }
        if self.sts_iam_role_arn:
            data["stsIAMRoleARN"] = self.sts_iam_role_arn
        return data


@dataclass
class CredentialsRequestSpec:
    """Desired state of a CredentialsRequest."""

    secret_ref: ObjectReference
    provider_spec: AWSProviderSpec | None = None
    service_account_names: list[str] = field(default_factory=list)
    cloud_token_path: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"secretRef": self.secret_ref.to_dict()}
        if self.provider_spec is not None:
            data["providerSpec"] = self.provider_spec.to_dict()
        if self.service_account_names:
            data["serviceAccountNames"] = list(self.service_account_names)
        if self.cloud_token_path:
            data["cloudTokenPath"] = self.cloud_token_path
        return data


@dataclass
class CredentialsRequest:
    """A request to the cloud credential operator for a credentials secret."""

    metadata: ObjectMeta
    spec: CredentialsRequestSpec
    api_version: str = CLOUD_CREDENTIAL_API_VERSION
    kind: str = CREDENTIALS_REQUEST_KIND

    def to_dict(self) -> dict[str, Any]:
        """Return the resource as its JSON-compatible representation."""
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": _meta_to_dict(self.metadata),
            "spec": self.spec.to_dict(),
        }


def create_credentials_request_name(name: str) -> NamespacedName:
    """Return the name of a CredentialsRequest, always in the cloud credential operator's namespace."""
    return NamespacedName(name=name, namespace=CREDENTIALS_REQUEST_NAMESPACE)


def create_credentials_secret_ref(name: str, namespace: str) -> ObjectReference:
    """Return a reference to the secret the credentials are written to."""
    return ObjectReference(name=name, namespace=namespace)


def create_provider_config(
    config: AWSLoadBalancerCredentialsRequestConfig | None,
    statements: Iterable[PolicyStatement],
) -> AWSProviderSpec:
    """Return the AWS provider spec requesting the given permissions."""
    provider_spec = AWSProviderSpec(statement_entries=list(statements))
    if config is not None and config.sts_iam_role_arn:
        provider_spec.sts_iam_role_arn = config.sts_iam_role_arn
    return provider_spec


def desired_credentials_request(
    name: NamespacedName,
    secret_ref: ObjectReference,
    sa_name: str,
    config: AWSLoadBalancerCredentialsRequestConfig | None,
    statements: Iterable[PolicyStatement],
) -> CredentialsRequest:
    """Return the CredentialsRequest the operator wants to exist."""
    spec = CredentialsRequestSpec(
        secret_ref=ObjectReference(name=secret_ref.name, namespace=secret_ref.namespace),
        service_account_names=[sa_name],
    )
    if config is not None and config.sts_iam_role_arn:
        spec.cloud_token_path = posixpath.join(BOUND_SA_TOKEN_DIR, "token")
    spec.provider_spec = create_provider_config(config, statements)
    return CredentialsRequest(metadata=ObjectMeta(name=name.name, namespace=name.namespace), spec=spec)


def credentials_request_for_controller(
    controller_name: str,
    namespace: str,
    config: AWSLoadBalancerCredentialsRequestConfig | None,
    statements: Iterable[PolicyStatement],
) -> CredentialsRequest:
    """Return the desired CredentialsRequest of the named controller instance.

    The credentials secret is placed in the given (operator) namespace.
    """
    name = f"{CONTROLLER_RESOURCE_PREFIX}-{controller_name}"
    request_name = create_credentials_request_name(name)
    secret_name = f"{CONTROLLER_RESOURCE_PREFIX}-credentialsrequest-{controller_name}"
    secret_ref = create_credentials_secret_ref(secret_name, namespace)
    return desired_credentials_request(request_name, secret_ref, name, config, statements)