"""Loading, reshaping and rendering of AWS IAM policy documents."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

DEFAULT_FUNCTION = "GetIAMPolicy"

# Action prefixes that minification collapses into a single wildcard action.
COMPRESSION_PREFIXES = {
    "ec2:Describe": "ec2:Describe*",
    "elasticloadbalancing:Describe": "elasticloadbalancing:Describe*",
}

_MISSING = object()

_GO_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}

_GO_HEADER = (
    "\npackage {package}\n\n"
    'import cco "github.com/openshift/cloud-credential-operator/pkg/apis/cloudcredential/v1"\n'
)

_GO_DEFINITION = (
    "type IAMPolicy struct {\n"
    "\tVersion   string\n"
    "\tStatement []cco.StatementEntry\n"
    "}"
)

_CR_HEADER = (
    "apiVersion: cloudcredential.openshift.io/v1\n"
    "kind: CredentialsRequest\n"
    "metadata:\n"
    "  name: aws-load-balancer-controller\n"
    "  namespace: openshift-cloud-credential-operator\n"
    "spec:\n"
    "  providerSpec:\n"
    "    apiVersion: cloudcredential.openshift.io/v1\n"
    "    kind: AWSProviderSpec\n"
    "    statementEntries:"
)

_CR_FOOTER = (
    "\n  secretRef:\n"
    "    name: aws-load-balancer-controller-cluster\n"
    "    namespace: aws-load-balancer-operator\n"
    "  serviceAccountNames:\n"
    "  - aws-load-balancer-controller-cluster\n"
)


class PolicyError(Exception):
    """Raised when a policy document cannot be read, parsed or rendered."""


@dataclass
class PolicyStatement:
    """One statement of an IAM policy."""

    effect: str = ""
    action: list[str] = field(default_factory=list)
    resource: list[str] = field(default_factory=list)
    condition: dict[str, dict[str, Any]] | None = None


@dataclass
class IAMPolicy:
    """An IAM policy document."""

    version: str = ""
    statements: list[PolicyStatement] = field(default_factory=list)


def _go_float(value: float) -> str:
    number = float(value)
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    return repr(number)


def _bad_verb(verb: str, value: Any) -> str:
    """Format a non-string value the way a string verb reports it."""
    if value is None:
        return f"%!{verb}(<nil>)"
    if isinstance(value, bool):
        return f"%!{verb}(bool={'true' if value else 'false'})"
    if isinstance(value, (int, float)):
        return f"%!{verb}(float64={_go_float(value)})"
    raise PolicyError(f"unsupported value {value!r} in policy")


def _go_quote(value: Any) -> str:
    """Return a double-quoted, escaped string literal for the value."""
    if not isinstance(value, str):
        return _bad_verb("q", value)
    parts = []
    for char in value:
        if char in _GO_ESCAPES:
            parts.append(_GO_ESCAPES[char])
        elif char.isprintable():
            parts.append(char)
        elif ord(char) < 0x80:
            parts.append(f"\\x{ord(char):02x}")
        elif ord(char) <= 0xFFFF:
            parts.append(f"\\u{ord(char):04x}")
        else:
            parts.append(f"\\U{ord(char):08x}")
    return '"' + "".join(parts) + '"'


def parse_aws_value(value: Any) -> list[str]:
    """Turn a policy's string-or-list field into a list of strings."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [item if isinstance(item, str) else _bad_verb("s", item) for item in value]
    raise PolicyError(f"unsupported type {type(value).__name__} in list")


def _lookup(data: dict[str, Any], name: str) -> Any:
    if name in data:
        return data[name]
    lowered = name.lower()
    for key, value in data.items():
        if key.lower() == lowered:
            return value
    return _MISSING


def _parse_condition(value: Any) -> dict[str, dict[str, Any]] | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise PolicyError("policy condition must be an object")
    condition: dict[str, dict[str, Any]] = {}
    for operator, pairs in value.items():
        if pairs is None:
            condition[operator] = {}
            continue
        if not isinstance(pairs, dict):
            raise PolicyError(f"policy condition {operator!r} must be an object")
        condition[operator] = dict(pairs)
    return condition


def _parse_statement(data: Any) -> PolicyStatement:
    if data is None:
        return PolicyStatement()
    if not isinstance(data, dict):
        raise PolicyError("policy statement must be an object")
    effect = _lookup(data, "Effect")
    if effect is _MISSING or effect is None:
        effect = ""
    if not isinstance(effect, str):
        raise PolicyError("policy statement effect must be a string")
    action = _lookup(data, "Action")
    resource = _lookup(data, "Resource")
    condition = _lookup(data, "Condition")
    return PolicyStatement(
        effect=effect,
        action=[] if action is _MISSING else parse_aws_value(action),
        resource=[] if resource is _MISSING else parse_aws_value(resource),
        condition=None if condition is _MISSING else _parse_condition(condition),
    )


def load_policy(text: str | bytes) -> IAMPolicy:
    """Parse an IAM policy JSON document."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise PolicyError(f"failed to parse policy JSON {exc}") from exc
    if data is None:
        return IAMPolicy()
    if not isinstance(data, dict):
        raise PolicyError("failed to parse policy JSON: document must be an object")
    version = _lookup(data, "Version")
    if version is _MISSING or version is None:
        version = ""
    if not isinstance(version, str):
        raise PolicyError("failed to parse policy JSON: Version must be a string")
    statements = _lookup(data, "Statement")
    if statements is _MISSING or statements is None:
        statements = []
    if not isinstance(statements, list):
        raise PolicyError("failed to parse policy JSON: Statement must be a list")
    return IAMPolicy(version=version, statements=[_parse_statement(item) for item in statements])


def _compress(action: str) -> str:
    for prefix, wildcard in COMPRESSION_PREFIXES.items():
        if action.startswith(prefix):
            return wildcard
    return action


def minify(policy: IAMPolicy) -> IAMPolicy:
    """Collapse the policy into one statement allowing every action on every resource.

    Describe actions are replaced by wildcards and all resource and condition
    limits are dropped, so the resulting policy is much weaker than the input.
    """
    actions = sorted({_compress(action) for statement in policy.statements for action in statement.action})
    return IAMPolicy(
        version=policy.version,
        statements=[PolicyStatement(effect="Allow", action=actions, resource=["*"])],
    )


def split(policy: IAMPolicy) -> IAMPolicy:
    """Split statements so that each one carries a single resource."""
    statements: list[PolicyStatement] = []
    for statement in policy.statements:
        if len(statement.resource) > 1:
            statements.extend(replace(statement, resource=[resource]) for resource in statement.resource)
        else:
            statements.append(statement)
    return IAMPolicy(version=policy.version, statements=statements)


def string_or_slice(value: Any, yaml: bool) -> str:
    """Render a condition value as a quoted string or a list of quoted strings."""
    if isinstance(value, list):
        joined = ",".join(_go_quote(item) for item in value)
        return f"[{joined}]" if yaml else f"[]string{{{joined}}}"
    return _go_quote(value)


def _go_statement(statement: PolicyStatement) -> str:
    resources = "".join(f'"{resource}"' for resource in statement.resource)
    out = [
        "\n\t\t\t{",
        f'\n\t\t\t\tEffect: "{statement.effect}",',
        f"\n\t\t\t\tResource: {resources},",
        "\n\t\t\t\tPolicyCondition: cco.IAMPolicyCondition{",
    ]
    for operator, pairs in sorted((statement.condition or {}).items()):
        out.append(f'\n\t\t\t\t\t"{operator}": cco.IAMPolicyConditionKeyValue{{')
        for key, value in sorted(pairs.items()):
            out.append(f'\n\t\t\t\t\t\t"{key}": {string_or_slice(value, False)},')
        out.append("\n\t\t\t\t\t},")
    out.append("\n\t\t\t\t},")
    out.append("\n\t\t\t\tAction: []string{")
    out.extend(f'\n\t\t\t\t\t"{action}",' for action in statement.action)
    out.append("\n\t\t\t\t},")
    out.append("\n\t\t\t},")
    return "".join(out)


def render_go(policy: IAMPolicy, package: str, function: str) -> str:
    """Render the policy as source of a function returning it."""
    out = [_GO_HEADER.format(package=package)]
    if function == DEFAULT_FUNCTION:
        out.append(_GO_DEFINITION)
    else:
        out.append("\n")
    out.append(f"\n\nfunc {function}() IAMPolicy {{" if function == DEFAULT_FUNCTION
               else f"func {function}() IAMPolicy {{")
    out.append("\n\treturn IAMPolicy{")
    out.append("\n\t\tStatement: []cco.StatementEntry{")
    out.extend(_go_statement(statement) for statement in policy.statements)
    out.append("\n\t\t},\n\t}\n}\n")
    return "".join(out)


def _cr_statement(statement: PolicyStatement) -> str:
    out = ["\n    - action:"]
    out.extend(f"\n      - {action}" for action in statement.action)
    out.append(f"\n      effect: {statement.effect}")
    out.append("\n      resource: " + "".join(_go_quote(resource) for resource in statement.resource))
    if statement.condition is not None:
        out.append("\n      policyCondition:")
        for operator, pairs in sorted(statement.condition.items()):
            out.append(f'\n          "{operator}":')
            for key, value in sorted(pairs.items()):
                out.append(f'\n              "{key}": {string_or_slice(value, True)}')
    return "".join(out)


def render_credentials_request(policy: IAMPolicy) -> str:
    """Render the policy as a CredentialsRequest YAML document."""
    return _CR_HEADER + "".join(_cr_statement(statement) for statement in policy.statements) + _CR_FOOTER


def _read_policy(input_file: str | Path, skip_minify: bool, split_resource: bool) -> IAMPolicy:
    try:
        text = Path(input_file).read_bytes()
    except OSError as exc:
        raise PolicyError(f"failed to read input file {exc}") from exc
    policy = load_policy(text)
    if split_resource:
        policy = split(policy)
    if not skip_minify:
        policy = minify(policy)
    return policy


def generate_iam_policy(
    input_file: str | Path,
    output: str | Path,
    output_cr: str | Path | None = None,
    package: str = "main",
    function: str = DEFAULT_FUNCTION,
    skip_minify: bool = False,
    split_resource: bool = False,
) -> None:
    """Read a policy JSON file and write its code form and, optionally, its CredentialsRequest."""
    policy = _read_policy(input_file, skip_minify, split_resource)
    Path(output).write_text(render_go(policy, package, function), encoding="utf-8")
    if output_cr:
        cr_policy = _read_policy(input_file, skip_minify, split_resource)
        Path(output_cr).write_text(render_credentials_request(cr_policy), encoding="utf-8")