# lbcoperator

Building blocks for running an AWS load balancer controller on an OpenShift
cluster:

- **Resource models** for the `AWSLoadBalancerController` custom resource in
  the `networking.olm.openshift.io` group, in the `v1` (hub) and `v1alpha1`
  versions (`lbcoperator.api_v1`, `lbcoperator.api_v1alpha1`). Each version
  converts to and from plain dictionaries with `to_dict` / `from_dict`, which
  fill in the API defaults. The `v1` types can be checked with `validate()`.
  `v1alpha1` resources convert to the hub with `convert_to()` and back with
  `AWSLoadBalancerController.convert_from(hub)`.
- **IAM policy tooling** that reads an AWS IAM policy JSON document, optionally
  splits statements to one resource each or minifies it into a single
  wildcard-compressed statement, and renders it as Go source or as a
  `CredentialsRequest` YAML manifest (`lbcoperator.iampolicy`, and the
  `iamctl` command).
- **Credentials requests** for the controller: the desired
  `CredentialsRequest` object, its secret reference and AWS provider spec,
  including the STS role variant (`lbcoperator.credentials_request`).
- **Cluster discovery**: reading the cluster name and AWS region from the
  cluster `Infrastructure` object and finding the cluster's VPC by its
  `kubernetes.io/cluster/<name>` tag, with polling for freshly provisioned
  credentials (`lbcoperator.cluster`, `lbcoperator.aws`).

The package has no runtime dependencies beyond the Python standard library and
needs Python 3.10 or later.

## Installation

```
pip install lbcoperator
```

To run the test suite:

```
pip install "lbcoperator[test]"
pytest
```

## The `iamctl` command

`iamctl` converts an IAM policy JSON file into Go code and, optionally, a
`CredentialsRequest` YAML manifest.

```
iamctl -i assets/iam-policy.json -o iam_policy.go -p awsloadbalancercontroller
```

Options:

| Option | Meaning |
| --- | --- |
| `-i`, `--input-file` | Input IAM policy JSON file (required). |
| `-o`, `--output-file` | Output Go file (required). |
| `-p`, `--package` | Go package name of the output (required). |
| `-c`, `--output-cr-file` | Also write a `CredentialsRequest` YAML file here. |
| `-f`, `--function` | Go function name (default `GetIAMPolicy`). The `IAMPolicy` type definition is emitted only with the default name. |
| `-n`, `--no-minify` | Keep the policy as written instead of minifying it. |
| `-s`, `--split-resource` | Split each statement into one statement per resource. |
| `-t`, `--toggle` | Accepted and ignored. |

Unless `--no-minify` is given, the policy is reduced to a single `Allow`
statement on resource `*` whose actions are the sorted, de-duplicated union of
all actions, with `ec2:Describe…` and `elasticloadbalancing:Describe…` actions
compressed to `ec2:Describe*` and `elasticloadbalancing:Describe*`. Resource
and condition limits are dropped, which loosens the policy's granularity, so
use it only where size limits require it.

The command exits with status 1 and a message on standard error when the input
cannot be read or parsed.

For example, a minified policy for inline use and a full, split policy for STS
roles:

```
iamctl -i assets/iam-policy.json -o iam_policy_minify.go -p awsloadbalancercontroller -f GetIAMPolicyMinify -c controller-credentials-request-minify.yaml
iamctl -i assets/iam-policy.json -o iam_policy.go -p awsloadbalancercontroller -c controller-credentials-request.yaml -n -s
```

## Library use

Working with a policy directly:

```python
from pathlib import Path

from lbcoperator.iampolicy import load_policy, minify, render_credentials_request

policy = minify(load_policy(Path("iam-policy.json").read_text()))
print(render_credentials_request(policy))
```

`load_policy` and `generate_iam_policy` raise `PolicyError` on unreadable or
malformed input.

Converting a `v1alpha1` resource to the `v1` hub version and back:

```python
from lbcoperator.api_v1alpha1 import AWSLoadBalancerController

document = {"metadata": {"name": "cluster"}, "spec": {"additionalResourceTags": {"team": "web"}}}
old = AWSLoadBalancerController.from_dict(document)
hub = old.convert_to()
again = AWSLoadBalancerController.convert_from(hub)
```

In `v1alpha1`, `additionalResourceTags` is a mapping of key to value; in `v1`
it is a list of `AWSResourceTag` entries with unique keys. The `v1` field
`credentialsRequestConfig` has no `v1alpha1` counterpart and is dropped when
converting from the hub.

Building the controller's credentials request:

```python
from lbcoperator.credentials_request import credentials_request_for_controller
from lbcoperator.iampolicy import load_policy, split

statements = split(load_policy(policy_text)).statements
request = credentials_request_for_controller("cluster", "aws-load-balancer-operator", None, statements)
manifest = request.to_dict()
```

The request is named `aws-load-balancer-controller-<name>` in the
`openshift-cloud-credential-operator` namespace and writes its secret
`aws-load-balancer-controller-credentialsrequest-<name>` to the given
namespace. Each statement must carry at most one resource. When the config
sets an STS IAM role ARN, the provider spec carries it and the request gets a
cloud token path.

Finding the cluster's details and VPC:

```python
from lbcoperator.aws import get_vpc_id
from lbcoperator.cluster import cluster_info, poll_vpc_id

info = cluster_info(infrastructure)        # ClusterInfo(cluster_name, aws_region)
vpc_id = get_vpc_id(client, info.cluster_name)
```

`client` is any object with a `describe_vpcs(filters)` method returning `Vpc`
objects (the `VPCClient` protocol). `get_vpc_id` raises `AWSError` when the
call fails, or when no VPC, or more than one VPC, carries the tag
`kubernetes.io/cluster/<name>`. `poll_vpc_id` retries the lookup at a fixed
interval (1 second by default) until it succeeds or the timeout (20 seconds by
default) passes, then raises `ClusterInfoError`. `cluster_info` raises
`ClusterInfoError` when the infrastructure name or AWS region is missing.

## What the package does not do

It does not talk to a cluster or to AWS by itself: there is no reconciler, no
controller manager, webhook server or deployment logic, and no EC2 client.
Callers supply the `Infrastructure` object as a dictionary and an object that
implements `VPCClient`, and apply the resources this package builds with their
own tools.