"""
Tests for configuration resolution from environment and payload.
"""

import json

import pytest

from cognito_restore.config.manager import ConfigurationManager, STRING_RULES, FLAG_RULES
from cognito_restore.models.config import RestoreConfig, TriState
from cognito_restore.models.exceptions import ConfigurationError


REQUIRED_RULES = [rule for rule in STRING_RULES if rule.required]


class TestRequiredFields:

    @pytest.mark.parametrize("rule", REQUIRED_RULES, ids=lambda r: r.field_name)
    def test_missing_from_both_sources_names_field(self, base_environ, rule):
        del base_environ[rule.env_var]
        manager = ConfigurationManager(base_environ)

        with pytest.raises(ConfigurationError) as exc_info:
            manager.resolve({"restoreUsers": True})

        message = str(exc_info.value)
        assert rule.payload_key in message
        assert rule.env_var in message
        assert exc_info.value.context["field"] == rule.field_name

    @pytest.mark.parametrize("rule", REQUIRED_RULES, ids=lambda r: r.field_name)
    def test_missing_without_payload(self, base_environ, rule):
        del base_environ[rule.env_var]

        with pytest.raises(ConfigurationError):
            ConfigurationManager(base_environ).resolve()

    @pytest.mark.parametrize("rule", REQUIRED_RULES, ids=lambda r: r.field_name)
    def test_payload_value_wins_over_environment(self, base_environ, rule):
        payload = {rule.payload_key: "from-payload"}

        config = ConfigurationManager(base_environ).resolve(payload)

        assert getattr(config, rule.field_name) == "from-payload"

    @pytest.mark.parametrize("rule", REQUIRED_RULES, ids=lambda r: r.field_name)
    def test_payload_supplies_missing_environment_value(self, base_environ, rule):
        del base_environ[rule.env_var]

        config = ConfigurationManager(base_environ).resolve({rule.payload_key: "from-payload"})

        assert getattr(config, rule.field_name) == "from-payload"

    @pytest.mark.parametrize("empty", ["", None])
    def test_empty_payload_value_keeps_environment(self, base_environ, empty):
        config = ConfigurationManager(base_environ).resolve({"s3BucketName": empty})

        assert config.s3_bucket_name == base_environ["S3_BUCKET_NAME"]

    def test_environment_only(self, base_environ):
        config = ConfigurationManager(base_environ).resolve()

        assert config.aws_region == "us-east-1"
        assert config.cognito_user_pool_id == "us-east-1_envpool"
        assert config.backup_object_key == "2023-01-19T09:00:00Z/users.json"

    def test_user_pool_id_uppercase_alias(self, base_environ):
        config = ConfigurationManager(base_environ).resolve({"cognitoUserPoolID": "us-east-1_alias"})

        assert config.cognito_user_pool_id == "us-east-1_alias"

    def test_non_mapping_payload_rejected(self, base_environ):
        with pytest.raises(ConfigurationError):
            ConfigurationManager(base_environ).resolve(["not", "a", "mapping"])

    def test_invalid_region_rejected(self, base_environ):
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigurationManager(base_environ).resolve({"cognitoRegion": "US WEST"})

        assert "Cognito region format is invalid" in str(exc_info.value)

    def test_invalid_kms_region_rejected(self, base_environ):
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigurationManager(base_environ).resolve({"kmsKeyId": "k", "kmsRegion": "eu_west_1"})

        assert "KMS region format is invalid" in str(exc_info.value)


class TestKmsSettings:

    def test_decryption_disabled_by_default(self, base_environ):
        config = ConfigurationManager(base_environ).resolve()

        assert config.kms_key_id is None
        assert not config.decryption_enabled
        assert config.effective_kms_region == config.aws_region

    def test_kms_settings_from_payload(self, base_environ):
        base_environ["KMS_KEY_ID"] = "alias/env-key"
        config = ConfigurationManager(base_environ).resolve({
            "kmsKeyId": "alias/payload-key",
            "kmsRegion": "eu-west-1"
        })

        assert config.kms_key_id == "alias/payload-key"
        assert config.decryption_enabled
        assert config.effective_kms_region == "eu-west-1"


class TestFlags:

    @pytest.mark.parametrize("rule", FLAG_RULES, ids=lambda r: r.field_name)
    def test_unset_defaults_to_false(self, base_environ, rule):
        config = ConfigurationManager(base_environ).resolve({})

        assert getattr(config, rule.field_name) is TriState.FALSE

    @pytest.mark.parametrize("rule", FLAG_RULES, ids=lambda r: r.field_name)
    @pytest.mark.parametrize("invalid", ["yes", 1, "true", [True]])
    def test_invalid_payload_value_defaults_to_false(self, base_environ, rule, invalid):
        config = ConfigurationManager(base_environ).resolve({rule.payload_key: invalid})

        assert getattr(config, rule.field_name) is TriState.FALSE

    @pytest.mark.parametrize("rule", FLAG_RULES, ids=lambda r: r.field_name)
    @pytest.mark.parametrize("raw,expected", [
        ("1", TriState.TRUE), ("t", TriState.TRUE), ("TRUE", TriState.TRUE), ("True", TriState.TRUE),
        ("0", TriState.FALSE), ("f", TriState.FALSE), ("false", TriState.FALSE),
    ])
    def test_environment_value_parsed(self, base_environ, rule, raw, expected):
        base_environ[rule.env_var] = raw

        config = ConfigurationManager(base_environ).resolve()

        assert getattr(config, rule.field_name) is expected

    @pytest.mark.parametrize("rule", FLAG_RULES, ids=lambda r: r.field_name)
    def test_malformed_environment_value_is_hard_error(self, base_environ, rule):
        base_environ[rule.env_var] = "maybe"

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigurationManager(base_environ).resolve({rule.payload_key: True})

        assert rule.env_var in str(exc_info.value)

    @pytest.mark.parametrize("rule", FLAG_RULES, ids=lambda r: r.field_name)
    @pytest.mark.parametrize("env_value,payload_value,expected", [
        ("true", False, TriState.FALSE),
        ("false", True, TriState.TRUE),
        ("true", None, TriState.TRUE),
    ])
    def test_payload_overrides_environment(self, base_environ, rule, env_value, payload_value, expected):
        base_environ[rule.env_var] = env_value

        config = ConfigurationManager(base_environ).resolve({rule.payload_key: payload_value})

        assert getattr(config, rule.field_name) is expected

    def test_cleanup_flag_respects_payload_true(self, base_environ):
        config = ConfigurationManager(base_environ).resolve({"cleanUpBeforeRestore": True})

        assert config.cleanup_before_restore is TriState.TRUE

    def test_cleanup_flag_respects_environment_true(self, base_environ):
        base_environ["CLEANUP_BEFORE_RESTORE"] = "true"

        config = ConfigurationManager(base_environ).resolve({"restoreUsers": True})

        assert config.cleanup_before_restore is TriState.TRUE


class TestTriState:

    def test_resolve(self):
        assert TriState.UNSET.resolve() is False
        assert TriState.UNSET.resolve(True) is True
        assert TriState.TRUE.resolve() is True
        assert TriState.FALSE.resolve(True) is False
        assert TriState.TRUE
        assert not TriState.FALSE
        assert not TriState.UNSET

    def test_is_set(self):
        assert not TriState.UNSET.is_set
        assert TriState.FALSE.is_set
        assert TriState.TRUE.is_set

    def test_from_bool(self):
        assert TriState.from_bool(None) is TriState.UNSET
        assert TriState.from_bool(False) is TriState.FALSE
        assert TriState.from_bool(True) is TriState.TRUE

    @pytest.mark.parametrize("text", ["", "yes", "on", "2", "tRuE"])
    def test_parse_rejects_unknown_spellings(self, text):
        with pytest.raises(ValueError):
            TriState.parse(text)


class TestLoadEvent:

    def test_yaml_event(self, tmp_path):
        event_file = tmp_path / "event.yaml"
        event_file.write_text("cognitoUserPoolId: P\nrestoreUsers: true\n")

        event = ConfigurationManager({}).load_event(str(event_file))

        assert event == {"cognitoUserPoolId": "P", "restoreUsers": True}

    def test_json_event(self, tmp_path):
        event_file = tmp_path / "event.json"
        event_file.write_text(json.dumps({"s3BucketName": "B", "cleanUpBeforeRestore": False}))

        event = ConfigurationManager({}).load_event(str(event_file))

        assert event == {"s3BucketName": "B", "cleanUpBeforeRestore": False}

    def test_empty_yaml_event(self, tmp_path):
        event_file = tmp_path / "event.yml"
        event_file.write_text("")

        assert ConfigurationManager({}).load_event(str(event_file)) == {}

    def test_unsupported_extension(self, tmp_path):
        event_file = tmp_path / "event.txt"
        event_file.write_text("{}")

        with pytest.raises(ConfigurationError):
            ConfigurationManager({}).load_event(str(event_file))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigurationManager({}).load_event(str(tmp_path / "missing.yaml"))

    def test_malformed_yaml(self, tmp_path):
        event_file = tmp_path / "event.yaml"
        event_file.write_text("cognitoUserPoolId: [unclosed\n")

        with pytest.raises(ConfigurationError):
            ConfigurationManager({}).load_event(str(event_file))

    def test_list_event_rejected(self, tmp_path):
        event_file = tmp_path / "event.json"
        event_file.write_text("[1, 2]")

        with pytest.raises(ConfigurationError):
            ConfigurationManager({}).load_event(str(event_file))


def test_backup_object_key_strips_trailing_slash():
    config = RestoreConfig(
        aws_region="us-east-1",
        cognito_user_pool_id="P",
        cognito_region="us-east-1",
        s3_bucket_name="B",
        s3_bucket_region="us-east-1",
        backup_dir_path="D/",
    )

    assert config.backup_object_key == "D/users.json"
