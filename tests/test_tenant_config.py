"""
Test suite for tenant label resolution and per-tenant configuration.

Coverage:
- Label to environment prefix mapping
- Interactive label resolution (single, multiple, unknown labels)
- Installation label fallback
- Fail-closed configuration loading with the list of missing keys
- Environment snapshot loading from .env and the process environment

Test types: Unit
"""

import pytest

from oauth_relay.exceptions import ConfigurationError
from oauth_relay.services.auth import TenantRegistry, label_prefix
from test_utils import TestTenants, acme_env, beta_env, make_registry


@pytest.mark.unit
class TestLabelPrefix:
    def test_label_is_upper_cased(self):
        assert label_prefix("acme") == "ACME"

    def test_non_alphanumerics_become_underscores(self):
        assert label_prefix("beta-eu") == "BETA_EU"
        assert label_prefix("Acme.v2 prod") == "ACME_V2_PROD"


@pytest.mark.unit
class TestResolveLabel:
    def test_single_label_is_used_when_none_requested(self, single_registry):
        assert single_registry.resolve_label(None) == TestTenants.ACME
        assert single_registry.resolve_label("") == TestTenants.ACME

    def test_known_label_is_returned(self, multi_registry):
        assert multi_registry.resolve_label(TestTenants.BETA) == TestTenants.BETA

    def test_unknown_label_fails_even_with_single_tenant(self, single_registry):
        assert single_registry.resolve_label("nope") is None

    def test_multiple_labels_require_explicit_choice(self, multi_registry):
        assert multi_registry.resolve_label(None) is None

    def test_no_labels_configured(self):
        assert make_registry([]).resolve_label(None) is None

    def test_labels_are_reported_in_configured_order(self, multi_registry):
        assert multi_registry.labels == [TestTenants.ACME, TestTenants.BETA]


@pytest.mark.unit
class TestResolveInstallLabel:
    def test_defaults_to_first_label(self, multi_registry):
        assert multi_registry.default_install_label() == TestTenants.ACME
        assert multi_registry.resolve_install_label(None) == TestTenants.ACME

    def test_known_override_wins(self, multi_registry):
        assert multi_registry.resolve_install_label(TestTenants.BETA) == TestTenants.BETA

    def test_unknown_override_falls_back_to_default(self, multi_registry):
        assert multi_registry.resolve_install_label("nope") == TestTenants.ACME

    def test_no_labels_is_a_configuration_error(self):
        registry = make_registry([])
        assert registry.default_install_label() is None
        with pytest.raises(ConfigurationError):
            registry.resolve_install_label(None)


@pytest.mark.unit
class TestGetConfig:
    def test_complete_config_is_loaded(self, single_registry):
        config = single_registry.get_config(TestTenants.ACME)

        assert config.label == TestTenants.ACME
        assert config.region == TestTenants.ACME_REGION
        assert config.app_uid == TestTenants.ACME_APP_UID
        assert config.client_id == TestTenants.ACME_CLIENT_ID
        assert config.client_secret == TestTenants.ACME_CLIENT_SECRET
        assert config.redirect_uri == TestTenants.ACME_REDIRECT_URI
        assert config.scope == TestTenants.ACME_SCOPE

    def test_scope_is_optional(self, multi_registry):
        assert multi_registry.get_config(TestTenants.BETA).scope == ""

    def test_hyphenated_label_uses_underscored_prefix(self, multi_registry):
        assert (
            multi_registry.get_config(TestTenants.BETA).client_id
            == TestTenants.BETA_CLIENT_ID
        )

    def test_missing_keys_are_listed(self):
        store = acme_env()
        del store["ACME_OAUTH_CLIENT_ID"]
        del store["ACME_OAUTH_REDIRECT_URI"]
        registry = make_registry([TestTenants.ACME], **store)

        with pytest.raises(ConfigurationError) as exc_info:
            registry.get_config(TestTenants.ACME)

        error = exc_info.value
        assert error.status_code == 500
        assert error.message == (
            "Missing env for app 'acme': ACME_OAUTH_CLIENT_ID, ACME_OAUTH_REDIRECT_URI"
        )
        assert error.details == {
            "missing": ["ACME_OAUTH_CLIENT_ID", "ACME_OAUTH_REDIRECT_URI"]
        }

    def test_blank_values_count_as_missing(self):
        registry = make_registry(
            [TestTenants.ACME], **acme_env(ACME_OAUTH_CLIENT_SECRET="   ")
        )
        with pytest.raises(ConfigurationError) as exc_info:
            registry.get_config(TestTenants.ACME)
        assert exc_info.value.details["missing"] == ["ACME_OAUTH_CLIENT_SECRET"]

    def test_unconfigured_label_lists_every_required_key(self, single_registry):
        with pytest.raises(ConfigurationError) as exc_info:
            single_registry.get_config("ghost")
        assert len(exc_info.value.details["missing"]) == 5

    def test_config_is_a_snapshot(self):
        store = acme_env()
        registry = TenantRegistry([TestTenants.ACME], store)
        store["ACME_OAUTH_CLIENT_ID"] = "changed"

        assert (
            registry.get_config(TestTenants.ACME).client_id
            == TestTenants.ACME_CLIENT_ID
        )


@pytest.mark.unit
class TestFromEnvironment:
    def test_process_environment_overrides_env_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        lines = [f"{key}={value}" for key, value in beta_env().items()]
        env_file.write_text("\n".join(lines) + "\n")

        monkeypatch.setenv("BETA_EU_OAUTH_CLIENT_ID", "from-process")

        registry = TenantRegistry.from_environment(
            [TestTenants.BETA], env_file=str(env_file)
        )
        config = registry.get_config(TestTenants.BETA)

        assert config.client_id == "from-process"
        assert config.app_uid == TestTenants.BETA_APP_UID

    def test_missing_env_file_is_ignored(self, tmp_path):
        registry = TenantRegistry.from_environment(
            ["x"], env_file=str(tmp_path / "absent.env")
        )
        assert registry.labels == ["x"]
