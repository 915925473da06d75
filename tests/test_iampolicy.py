import json

import pytest

from lbcoperator.iampolicy import (
    DEFAULT_FUNCTION,
    IAMPolicy,
    PolicyError,
    PolicyStatement,
    generate_iam_policy,
    load_policy,
    minify,
    parse_aws_value,
    render_credentials_request,
    render_go,
    split,
    string_or_slice,
)

POLICY = {
    "Version": "2012-10-17",
    "Statement": [
        {
            "Effect": "Allow",
            "Action": ["ec2:DescribeVpcs", "ec2:CreateTags", "elasticloadbalancing:DescribeTags"],
            "Resource": "*",
        },
        {
            "Effect": "Allow",
            "Action": "ec2:CreateTags",
            "Resource": ["arn:aws:ec2:*:*:security-group/*", "arn:aws:ec2:*:*:subnet/*"],
            "Condition": {"StringEquals": {"ec2:CreateAction": "CreateSecurityGroup"}},
        },
    ],
}


def test_parse_aws_value_string_and_list():
    assert parse_aws_value("ec2:CreateTags") == ["ec2:CreateTags"]
    assert parse_aws_value(["a", "b"]) == ["a", "b"]


def test_parse_aws_value_rejects_other_types():
    with pytest.raises(PolicyError):
        parse_aws_value({"a": 1})
    with pytest.raises(PolicyError):
        parse_aws_value(None)


def test_load_policy_reads_fields():
    policy = load_policy(json.dumps(POLICY))
    assert policy.version == POLICY["Version"]
    assert len(policy.statements) == 2
    assert policy.statements[0].resource == ["*"]
    assert policy.statements[1].action == ["ec2:CreateTags"]
    assert policy.statements[1].condition == POLICY["Statement"][1]["Condition"]
    assert policy.statements[0].condition is None


def test_load_policy_rejects_bad_json():
    with pytest.raises(PolicyError):
        load_policy("{not json")
    with pytest.raises(PolicyError):
        load_policy(json.dumps({"Statement": [{"Action": 3}]}))


def test_minify_compresses_and_sorts():
    policy = minify(load_policy(json.dumps(POLICY)))
    assert policy.version == POLICY["Version"]
    assert len(policy.statements) == 1
    statement = policy.statements[0]
    assert statement.effect == "Allow"
    assert statement.resource == ["*"]
    assert statement.condition is None
    assert statement.action == ["ec2:CreateTags", "ec2:Describe*", "elasticloadbalancing:Describe*"]
    assert statement.action == sorted(set(statement.action))


def test_split_one_resource_per_statement():
    original = load_policy(json.dumps(POLICY))
    result = split(original)
    assert len(result.statements) == 3
    assert all(len(statement.resource) == 1 for statement in result.statements)
    assert [s.resource[0] for s in result.statements[1:]] == POLICY["Statement"][1]["Resource"]
    assert all(s.condition == original.statements[1].condition for s in result.statements[1:])
    assert result.version == original.version


def test_string_or_slice_scalar_is_quoted():
    assert json.loads(string_or_slice("abc", False)) == "abc"
    assert string_or_slice("abc", True) == string_or_slice("abc", False)


def test_string_or_slice_list_forms_agree():
    values = ["x", "y\"z"]
    as_yaml = string_or_slice(values, True)
    assert json.loads(as_yaml) == values
    assert string_or_slice(values, False) == "[]string{" + as_yaml[1:-1] + "}"


def test_render_go_with_definition():
    policy = load_policy(json.dumps(POLICY))
    out = render_go(policy, "awsloadbalancercontroller", DEFAULT_FUNCTION)
    assert out.startswith("\npackage awsloadbalancercontroller\n")
    assert "type IAMPolicy struct {" in out
    assert f"func {DEFAULT_FUNCTION}() IAMPolicy {{" in out
    assert out.count("Effect:") == 2
    assert out.endswith("}\n")


def test_render_go_without_definition():
    policy = minify(load_policy(json.dumps(POLICY)))
    out = render_go(policy, "awsloadbalancercontroller", "GetIAMPolicyMinify")
    assert "type IAMPolicy struct" not in out
    assert "func GetIAMPolicyMinify() IAMPolicy {" in out
    assert '"ec2:Describe*",' in out


def test_render_go_condition_keys_sorted():
    statement = PolicyStatement(
        effect="Allow", action=["a"], resource=["*"],
        condition={"StringEquals": {"b": "x", "a": ["y", "z"]}},
    )
    out = render_go(IAMPolicy(statements=[statement]), "p", DEFAULT_FUNCTION)
    assert out.index('"a": []string{') < out.index('"b": ')


def test_render_credentials_request():
    policy = load_policy(json.dumps(POLICY))
    out = render_credentials_request(policy)
    assert out.startswith("apiVersion: cloudcredential.openshift.io/v1\nkind: CredentialsRequest\n")
    assert "\n      - ec2:DescribeVpcs" in out
    assert '\n      resource: "*"' in out
    assert out.count("policyCondition:") == 1
    assert out.endswith("  - aws-load-balancer-controller-cluster\n")


def test_render_credentials_request_empty_condition_kept():
    statement = PolicyStatement(effect="Allow", action=["a"], resource=["*"], condition={})
    out = render_credentials_request(IAMPolicy(statements=[statement]))
    assert "policyCondition:" in out
    go_out = render_go(IAMPolicy(statements=[statement]), "p", "F")
    assert "IAMPolicyConditionKeyValue" not in go_out


def test_generate_iam_policy_writes_files(tmp_path):
    source = tmp_path / "policy.json"
    source.write_text(json.dumps(POLICY))
    out = tmp_path / "policy.go"
    cr = tmp_path / "cr.yaml"
    generate_iam_policy(source, out, cr, "operator", DEFAULT_FUNCTION, False, False)
    expected = minify(load_policy(source.read_text()))
    assert out.read_text() == render_go(expected, "operator", DEFAULT_FUNCTION)
    assert cr.read_text() == render_credentials_request(expected)


def test_generate_iam_policy_split_without_minify(tmp_path):
    source = tmp_path / "policy.json"
    source.write_text(json.dumps(POLICY))
    out = tmp_path / "policy.go"
    generate_iam_policy(source, out, "", "operator", "F", True, True)
    expected = split(load_policy(source.read_text()))
    assert out.read_text() == render_go(expected, "operator", "F")


def test_generate_iam_policy_errors(tmp_path):
    with pytest.raises(PolicyError):
        generate_iam_policy(tmp_path / "missing.json", tmp_path / "out.go")
    bad = tmp_path / "bad.json"
    bad.write_text("[[")
    with pytest.raises(PolicyError):
        generate_iam_policy(bad, tmp_path / "out.go")
    assert not (tmp_path / "out.go").exists()