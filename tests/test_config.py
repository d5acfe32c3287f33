"""
Tests for mydaydeploy.config.loader module.

Tests deployment configuration including:
- Option validation and the order of validation failures
- Scope derivation from the tenant ID
- Option sources (YAML file, environment, .env) and merging
- Secret redaction
"""

from __future__ import annotations

from pathlib import Path

import pytest
import requests_mock

from mydaydeploy.config import (
    OutputMode,
    Platform,
    Scope,
    load_deployment_config,
    load_options_file,
    mask_secret,
    merge_options,
    options_from_env,
)
from mydaydeploy.exceptions import (
    ConfigError,
    InvalidIdentifierError,
    InvalidPlatformError,
    InvalidUrlError,
    PackageNotFoundError,
)


class TestAppIdValidation:
    """Tests for application ID validation."""

    @pytest.mark.parametrize(
        "app_id",
        ["acme.timesheet", "collabco.attendancecapture", "a1.b2", "tenant42.app7"],
    )
    def test_valid_app_ids_accepted(self, make_config, app_id):
        """Test that two-segment lowercase identifiers are accepted."""
        config = make_config(appId=app_id)
        assert config.app_id == app_id

    @pytest.mark.parametrize(
        "app_id",
        [
            "acmetimesheet",  # no separator
            "Acme.timesheet",  # uppercase
            "acme.TimeSheet",  # uppercase
            "acme.time-sheet",  # non-alphanumeric
            "acme_x.timesheet",  # non-alphanumeric
            "acme.timesheet.v2",  # three segments
            "a.timesheet",  # segment too short
            "1acme.timesheet",  # starts with a digit
            "acme.timesheet ",  # trailing whitespace
        ],
    )
    def test_invalid_app_ids_rejected(self, make_config, app_id):
        """Test that malformed identifiers raise InvalidIdentifierError."""
        with pytest.raises(InvalidIdentifierError, match="Invalid appId"):
            make_config(appId=app_id)

    def test_invalid_app_id_is_a_config_error(self, make_config):
        """Test that identifier errors can be caught as ConfigError."""
        with pytest.raises(ConfigError):
            make_config(appId="nope")


class TestFileValidation:
    """Tests for package file validation."""

    def test_missing_file_rejected(self, make_config, tmp_path):
        """Test that a non-existent file raises PackageNotFoundError."""
        with pytest.raises(PackageNotFoundError, match="does not exist"):
            make_config(file=str(tmp_path / "missing.zip"))

    def test_directory_rejected(self, make_config, tmp_path):
        """Test that a directory is not accepted as a package."""
        with pytest.raises(PackageNotFoundError):
            make_config(file=str(tmp_path))

    def test_file_stored_as_path(self, make_config, package_file):
        """Test that the file option becomes a Path."""
        config = make_config()
        assert isinstance(config.file, Path)
        assert config.file == package_file


class TestUrlValidation:
    """Tests for API and Identity Server URL validation."""

    @pytest.mark.parametrize(
        "url",
        ["not a url", "api.myday.test", "/relative/path", "ftp://api.myday.test", "https://"],
    )
    def test_malformed_api_url_rejected(self, make_config, url):
        """Test that non-absolute apiUrl values raise InvalidUrlError."""
        with pytest.raises(InvalidUrlError, match="apiUrl"):
            make_config(apiUrl=url)

    def test_malformed_idsrv_url_rejected(self, make_config):
        """Test that a malformed idSrvUrl raises InvalidUrlError."""
        with pytest.raises(InvalidUrlError, match="idSrvUrl"):
            make_config(idSrvUrl="identity")

    def test_trailing_slash_stripped(self, make_config):
        """Test that trailing slashes are removed from base URLs."""
        config = make_config(
            apiUrl="https://api.myday.test/v1/", idSrvUrl="https://identity.myday.test/"
        )
        assert config.api_url == "https://api.myday.test/v1"
        assert config.id_srv_url == "https://identity.myday.test"

    def test_malformed_url_rejected_without_network(self, make_config):
        """Test that URL validation happens before any HTTP request."""
        with requests_mock.Mocker() as m:
            with pytest.raises(InvalidUrlError):
                make_config(apiUrl="htp:/broken")

        assert m.call_count == 0


class TestPlatformValidation:
    """Tests for platform selection."""

    def test_default_platform_is_current(self, base_options):
        """Test that v3 is used when no platform is given."""
        del base_options["platform"]
        config = load_deployment_config(base_options)
        assert config.platform is Platform.CURRENT

    def test_legacy_platform(self, make_config):
        """Test that v2 selects the legacy platform."""
        assert make_config(platform="v2").platform is Platform.LEGACY

    def test_unknown_platform_rejected(self, make_config):
        """Test that an unknown platform raises InvalidPlatformError."""
        with pytest.raises(InvalidPlatformError, match="v4"):
            make_config(platform="v4")


class TestValidationOrder:
    """Tests that the first failure is the one reported."""

    def test_missing_options_reported_first(self, base_options):
        """Test that missing required options are listed by name."""
        del base_options["clientSecret"]
        del base_options["apiUrl"]

        with pytest.raises(ConfigError, match="apiUrl, clientSecret"):
            load_deployment_config(base_options)

    def test_empty_required_option_is_missing(self, make_config):
        """Test that blank values count as missing."""
        with pytest.raises(ConfigError, match="clientId"):
            make_config(clientId="  ")

    def test_identifier_checked_before_file(self, make_config, tmp_path):
        """Test that an invalid appId wins over a missing file."""
        with pytest.raises(InvalidIdentifierError):
            make_config(appId="BAD", file=str(tmp_path / "missing.zip"))

    def test_file_checked_before_urls(self, make_config, tmp_path):
        """Test that a missing file wins over a malformed URL."""
        with pytest.raises(PackageNotFoundError):
            make_config(file=str(tmp_path / "missing.zip"), apiUrl="nope")

    def test_urls_checked_before_platform(self, make_config):
        """Test that a malformed URL wins over an unknown platform."""
        with pytest.raises(InvalidUrlError):
            make_config(apiUrl="nope", platform="v9")


class TestScope:
    """Tests for scope derivation."""

    def test_global_without_tenant(self, make_config):
        """Test that scope is Global when no tenant ID is given."""
        config = make_config()
        assert config.tenant_id is None
        assert config.scope is Scope.GLOBAL

    @pytest.mark.parametrize("tenant_id", ["", "   ", None])
    def test_global_with_blank_tenant(self, make_config, tenant_id):
        """Test that blank tenant IDs are treated as absent."""
        config = make_config(tenantId=tenant_id)
        assert config.tenant_id is None
        assert config.scope is Scope.GLOBAL

    def test_tenant_with_tenant_id(self, make_config):
        """Test that scope is Tenant when a tenant ID is given."""
        config = make_config(tenantId="acme")
        assert config.tenant_id == "acme"
        assert config.scope is Scope.TENANT


class TestOutputOptions:
    """Tests for output mode, dry run and timeout options."""

    def test_default_output_mode(self, make_config):
        """Test that normal output is the default."""
        config = make_config()
        assert config.output_mode is OutputMode.NORMAL
        assert config.dry_run is False
        assert config.timeout is None

    def test_verbose_and_silent_modes(self, make_config):
        """Test that verbose and silent select their output modes."""
        assert make_config(verbose=True).output_mode is OutputMode.VERBOSE
        assert make_config(silent=True).output_mode is OutputMode.SILENT

    def test_verbose_and_silent_conflict(self, make_config):
        """Test that verbose and silent together are rejected."""
        with pytest.raises(ConfigError, match="mutually exclusive"):
            make_config(verbose=True, silent=True)

    def test_dry_run_from_string(self, make_config):
        """Test that string booleans (e.g. from YAML or env) are understood."""
        assert make_config(dryRun="true").dry_run is True
        assert make_config(dryRun="no").dry_run is False

    def test_invalid_boolean_rejected(self, make_config):
        """Test that unrecognised boolean strings are rejected."""
        with pytest.raises(ConfigError, match="dryRun"):
            make_config(dryRun="maybe")

    def test_timeout_parsed(self, make_config):
        """Test that the timeout becomes a float."""
        assert make_config(timeout="30").timeout == 30.0

    @pytest.mark.parametrize("timeout", ["0", "-5", "soon"])
    def test_invalid_timeout_rejected(self, make_config, timeout):
        """Test that non-positive or non-numeric timeouts are rejected."""
        with pytest.raises(ConfigError, match="imeout"):
            make_config(timeout=timeout)


class TestRedaction:
    """Tests for secret masking in the configuration summary."""

    def test_mask_secret_keeps_first_and_last(self):
        """Test that only the first and last characters are shown."""
        assert mask_secret("s3cret") == "s****t"

    @pytest.mark.parametrize("secret, expected", [("", ""), ("a", "*"), ("ab", "**")])
    def test_mask_short_secret(self, secret, expected):
        """Test that very short secrets are fully masked."""
        assert mask_secret(secret) == expected

    def test_redacted_summary(self, make_config):
        """Test that the summary never contains the secret."""
        config = make_config(tenantId="acme", platform="v2")
        summary = config.redacted()

        assert "s3cret-value" not in summary.values()
        assert summary["clientSecret"] == "s**********e"
        assert summary["scope"] == "Tenant"
        assert summary["platform"] == "v2"
        assert summary["clientScope"] == "myday-api"


class TestOptionSources:
    """Tests for YAML, environment and merged option sources."""

    def test_load_options_file(self, tmp_path):
        """Test loading options from YAML."""
        path = tmp_path / "deploy.yaml"
        path.write_text(
            "appId: acme.timesheet\nplatform: v2\ndryRun: true\n", encoding="utf-8"
        )

        options = load_options_file(path)

        assert options == {"appId": "acme.timesheet", "platform": "v2", "dryRun": True}

    def test_empty_options_file(self, tmp_path):
        """Test that an empty YAML file yields no options."""
        path = tmp_path / "deploy.yaml"
        path.write_text("", encoding="utf-8")
        assert load_options_file(path) == {}

    def test_missing_options_file_raises(self, tmp_path):
        """Test that a missing options file raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            load_options_file(tmp_path / "nope.yaml")

    def test_invalid_yaml_raises(self, tmp_path):
        """Test that YAML syntax errors raise ConfigError."""
        path = tmp_path / "deploy.yaml"
        path.write_text("appId: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Error parsing YAML"):
            load_options_file(path)

    def test_non_mapping_yaml_raises(self, tmp_path):
        """Test that a top-level list is rejected."""
        path = tmp_path / "deploy.yaml"
        path.write_text("- appId\n- file\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            load_options_file(path)

    def test_unknown_option_in_file_raises(self, tmp_path):
        """Test that typos in option names are reported."""
        path = tmp_path / "deploy.yaml"
        path.write_text("appID: acme.timesheet\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="appID"):
            load_options_file(path)

    def test_options_from_env(self, monkeypatch):
        """Test reading MYDAY_* variables."""
        monkeypatch.setenv("MYDAY_CLIENT_SECRET", "from-env")
        monkeypatch.setenv("MYDAY_TENANT_ID", "acme")
        monkeypatch.setenv("MYDAY_API_URL", "")

        options = options_from_env(use_dotenv=False)

        assert options == {"clientSecret": "from-env", "tenantId": "acme"}

    def test_options_from_dotenv_file(self, monkeypatch, tmp_path):
        """Test that a .env file is loaded and the environment wins over it."""
        dotenv = tmp_path / ".env"
        dotenv.write_text(
            "MYDAY_CLIENT_ID=dotenv-client\nMYDAY_CLIENT_SECRET=dotenv-secret\n",
            encoding="utf-8",
        )
        monkeypatch.setenv("MYDAY_CLIENT_SECRET", "env-secret")
        # load_dotenv writes into os.environ; let monkeypatch undo it
        monkeypatch.setenv("MYDAY_CLIENT_ID", "")
        monkeypatch.delenv("MYDAY_CLIENT_ID")

        options = options_from_env(dotenv_path=dotenv)

        assert options["clientId"] == "dotenv-client"
        assert options["clientSecret"] == "env-secret"

    def test_merge_options_last_wins(self):
        """Test that later layers override earlier ones."""
        merged = merge_options(
            {"appId": "acme.one", "platform": "v2"},
            {"appId": "acme.two"},
            {"platform": "v3"},
        )
        assert merged == {"appId": "acme.two", "platform": "v3"}

    def test_merge_options_none_does_not_override(self):
        """Test that None values keep the lower layer's value."""
        merged = merge_options({"clientSecret": "from-file"}, {"clientSecret": None}, None)
        assert merged == {"clientSecret": "from-file"}
