import pytest

from lbcoperator.api_v1 import (
    GROUP_VERSION,
    AWSAddon,
    AWSLoadBalancerController,
    AWSLoadBalancerControllerList,
    AWSLoadBalancerControllerSpec,
    AWSLoadBalancerControllerStatus,
    AWSLoadBalancerControllerStatusSubnets,
    AWSLoadBalancerCredentialsRequestConfig,
    AWSLoadBalancerDeploymentConfig,
    AWSResourceTag,
    Condition,
    ObjectMeta,
    SecretNameReference,
    SubnetTaggingPolicy,
)


def _full_controller():
    return AWSLoadBalancerController(
        metadata=ObjectMeta(name="cluster", generation=3),
        spec=AWSLoadBalancerControllerSpec(
            subnet_tagging=SubnetTaggingPolicy.MANUAL,
            additional_resource_tags=[AWSResourceTag("env", "test"), AWSResourceTag("team", "")],
            ingress_class="custom",
            config=AWSLoadBalancerDeploymentConfig(replicas=2),
            enabled_addons=[AWSAddon.SHIELD, AWSAddon.WAF_V2],
            credentials=SecretNameReference("my-secret"),
        ),
        status=AWSLoadBalancerControllerStatus(
            conditions=[Condition(type="Available", status="True", reason="Ok", message="ready",
                                  last_transition_time="2023-01-01T00:00:00Z", observed_generation=3)],
            observed_generation=3,
            subnets=AWSLoadBalancerControllerStatusSubnets(
                subnet_tagging=SubnetTaggingPolicy.MANUAL,
                internal=["subnet-a"],
                public=["subnet-b"],
                tagged=["subnet-c"],
                untagged=["subnet-d"],
            ),
            ingress_class="custom",
        ),
    )


def test_group_version_constants():
    assert GROUP_VERSION.group == "networking.olm.openshift.io"
    assert GROUP_VERSION.version == "v1"
    assert AWSLoadBalancerController().api_version == "networking.olm.openshift.io/v1"


def test_enum_values():
    assert AWSAddon("AWSWAFv1") is AWSAddon.WAF_V1
    assert SubnetTaggingPolicy("Auto") is SubnetTaggingPolicy.AUTO


def test_spec_defaults():
    spec = AWSLoadBalancerControllerSpec()
    assert spec.subnet_tagging is SubnetTaggingPolicy.AUTO
    assert spec.ingress_class == "alb"
    assert AWSLoadBalancerDeploymentConfig().replicas == 1


def test_spec_coerces_strings_to_enums():
    spec = AWSLoadBalancerControllerSpec(subnet_tagging="Manual", enabled_addons=["AWSShield"])
    assert spec.subnet_tagging is SubnetTaggingPolicy.MANUAL
    assert spec.enabled_addons == [AWSAddon.SHIELD]


def test_hub():
    assert AWSLoadBalancerController().hub() == GROUP_VERSION


def test_round_trip_full():
    controller = _full_controller()
    assert AWSLoadBalancerController.from_dict(controller.to_dict()) == controller


def test_round_trip_default():
    controller = AWSLoadBalancerController(metadata=ObjectMeta(name="cluster"))
    assert AWSLoadBalancerController.from_dict(controller.to_dict()) == controller


def test_to_dict_field_names():
    data = _full_controller().to_dict()
    assert data["kind"] == "AWSLoadBalancerController"
    assert data["spec"]["subnetTagging"] == "Manual"
    assert data["spec"]["additionalResourceTags"][0] == {"key": "env", "value": "test"}
    assert data["spec"]["enabledAddons"] == ["AWSShield", "AWSWAFv2"]
    assert data["spec"]["credentials"] == {"name": "my-secret"}
    assert data["status"]["subnets"]["internal"] == ["subnet-a"]


def test_to_dict_omits_empty_fields():
    data = AWSLoadBalancerController(metadata=ObjectMeta(name="cluster")).to_dict()
    assert data["metadata"] == {"name": "cluster"}
    assert "credentials" not in data["spec"]
    assert "config" not in data["spec"]
    assert data["status"] == {}


def test_from_dict_applies_defaults():
    controller = AWSLoadBalancerController.from_dict({"spec": {"config": {}}})
    assert controller.spec.subnet_tagging is SubnetTaggingPolicy.AUTO
    assert controller.spec.ingress_class == "alb"
    assert controller.spec.config.replicas == 1
    assert controller.status.subnets is None


def test_from_dict_rejects_unknown_addon():
    with pytest.raises(ValueError):
        AWSLoadBalancerController.from_dict({"spec": {"enabledAddons": ["Unknown"]}})


def test_from_dict_rejects_unknown_tagging_policy():
    with pytest.raises(ValueError):
        AWSLoadBalancerController.from_dict({"spec": {"subnetTagging": "Sometimes"}})


@pytest.mark.parametrize("key,value", [("env", "prod"), ("a:b/c=d+e-f@g", ""), ("k" * 128, "v" * 256)])
def test_valid_tags(key, value):
    tag = AWSResourceTag(key, value)
    tag.validate()
    assert (tag.key, tag.value) == (key, value)


@pytest.mark.parametrize("key,value", [("", "x"), ("k" * 129, "x"), ("has space", "x"),
                                       ("env", "v" * 257), ("env", "bad value")])
def test_invalid_tags(key, value):
    with pytest.raises(ValueError):
        AWSResourceTag(key, value).validate()


def test_valid_sts_role_arn():
    config = AWSLoadBalancerCredentialsRequestConfig("arn:aws-us-gov:iam::123456789012:role/albc")
    config.validate()
    assert config.sts_iam_role_arn.startswith("arn:aws-us-gov:")


@pytest.mark.parametrize("arn", ["arn:aws:iam::12345:role/albc", "arn:other:iam::123456789012:role/x",
                                 "arn:aws:iam::123456789012:user/x"])
def test_invalid_sts_role_arn(arn):
    with pytest.raises(ValueError):
        AWSLoadBalancerCredentialsRequestConfig(arn).validate()


def test_spec_too_many_tags():
    spec = AWSLoadBalancerControllerSpec(additional_resource_tags=[AWSResourceTag(f"k{i}", "v") for i in range(25)])
    with pytest.raises(ValueError):
        spec.validate()


def test_spec_maximum_tags_allowed():
    tags = [AWSResourceTag(f"k{i}", "v") for i in range(24)]
    spec = AWSLoadBalancerControllerSpec(additional_resource_tags=tags)
    spec.validate()
    assert len(spec.additional_resource_tags) == 24


def test_spec_duplicate_tag_keys():
    spec = AWSLoadBalancerControllerSpec(additional_resource_tags=[AWSResourceTag("k", "a"), AWSResourceTag("k", "b")])
    with pytest.raises(ValueError, match="duplicate"):
        spec.validate()


def test_spec_zero_replicas():
    spec = AWSLoadBalancerControllerSpec(config=AWSLoadBalancerDeploymentConfig(replicas=0))
    with pytest.raises(ValueError):
        spec.validate()


def test_spec_credentials_and_request_config_exclusive():
    spec = AWSLoadBalancerControllerSpec(
        credentials=SecretNameReference("my-secret"),
        credentials_request_config=AWSLoadBalancerCredentialsRequestConfig(),
    )
    with pytest.raises(ValueError, match="credentialsRequestConfig has no effect if credentials is provided"):
        spec.validate()


def test_controller_list():
    items = [AWSLoadBalancerController(metadata=ObjectMeta(name="cluster"))]
    controllers = AWSLoadBalancerControllerList(items=items)
    assert controllers.kind == "AWSLoadBalancerControllerList"
    assert [item.metadata.name for item in controllers.items] == ["cluster"]