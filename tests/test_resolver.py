"""Tests for ConfigurationResolver."""

import pytest

from openai_connector.config import (
    OPTIONAL_FIELDS,
    REQUIRED_FIELDS,
    CacheConfig,
    CircuitBreakerConfig,
    Compression,
    ConnectionConfig,
    Forwarded,
    Http1Settings,
    Http2Settings,
    HttpVersion,
    KeepAlive,
    PoolConfig,
    ProxyConfig,
    ResponseLimitConfig,
    RetryConfig,
    SecureSocketConfig,
)
from openai_connector.core.resolver import (
    ConfigurationResolver,
    load_connection_config,
    resolve_config,
)
from openai_connector.exceptions import ConfigValidationError


WELL_SHAPED = {
    "http1_settings": {"keep_alive": "NEVER", "chunking": "ALWAYS"},
    "http2_settings": {"http2_prior_knowledge": True},
    "cache": {"capacity": 8, "eviction_factor": 0.5},
    "response_limits": {"max_entity_body_size": 1024},
    "secure_socket": {"enable": True, "protocol_versions": ["TLSv1.2", "TLSv1.3"]},
    "proxy": {"host": "proxy.internal", "port": 3128},
}

EXPECTED_MODELS = {
    "http1_settings": Http1Settings(keep_alive="NEVER", chunking="ALWAYS"),
    "http2_settings": Http2Settings(http2_prior_knowledge=True),
    "cache": CacheConfig(capacity=8, eviction_factor=0.5),
    "response_limits": ResponseLimitConfig(max_entity_body_size=1024),
    "secure_socket": SecureSocketConfig(enable=True, protocol_versions=("TLSv1.2", "TLSv1.3")),
    "proxy": ProxyConfig(host="proxy.internal", port=3128),
}

MALFORMED = {
    "http1_settings": {"keep_alive": "SOMETIMES"},
    "http2_settings": {"http2_prior_knowledge": "definitely"},
    "cache": {"capacity": 0},
    "response_limits": {"max_header_size": "huge"},
    "secure_socket": {"protocol_versions": ["SSLv3"]},
    "proxy": {"port": 3128},
}


@pytest.fixture
def resolver() -> ConfigurationResolver:
    return ConfigurationResolver()


@pytest.mark.unit
class TestRequiredFields:
    def test_only_auth_resolves_to_required_fields(
        self, resolver: ConfigurationResolver
    ) -> None:
        resolved = resolver.resolve({"auth": {"token": "sk-x"}})

        assert resolved.model_fields_set == set(REQUIRED_FIELDS)
        assert resolved.optional_fields_set == set()
        for name in OPTIONAL_FIELDS:
            assert getattr(resolved, name) is None

    def test_required_defaults(self, resolver: ConfigurationResolver) -> None:
        resolved = resolver.resolve({"auth": {"token": "sk-x"}})

        assert resolved.auth.token.get_secret_value() == "sk-x"
        assert resolved.http_version is HttpVersion.HTTP_2_0
        assert resolved.timeout == 60.0
        assert resolved.forwarded is Forwarded.DISABLE
        assert resolved.compression is Compression.AUTO
        assert resolved.pool_config is None
        assert resolved.circuit_breaker is None
        assert resolved.retry_config is None
        assert resolved.validation is True

    def test_required_values_copied(self, resolver: ConfigurationResolver) -> None:
        config = ConnectionConfig(
            auth={"token": "sk-x"},
            http_version="1.1",
            timeout=5,
            forwarded="enable",
            pool_config=PoolConfig(max_active_connections=4),
            compression="NEVER",
            circuit_breaker=CircuitBreakerConfig(failure_threshold=0.5),
            retry_config=RetryConfig(count=2, status_codes=(503,)),
            validation=False,
        )

        resolved = resolver.resolve(config)

        for name in REQUIRED_FIELDS:
            assert getattr(resolved, name) == getattr(config, name)

    def test_missing_auth_fails(self, resolver: ConfigurationResolver) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            resolver.resolve({"timeout": 10})
        assert exc_info.value.field == "auth"

    def test_invalid_required_field_named(self, resolver: ConfigurationResolver) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            resolver.resolve({"auth": {"token": "sk-x"}, "timeout": -1})
        assert exc_info.value.field == "timeout"

    def test_unknown_field_rejected(self, resolver: ConfigurationResolver) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            resolver.resolve({"auth": {"token": "sk-x"}, "retries": 3})
        assert exc_info.value.field == "retries"

    def test_fractional_backoff_rejected(self, resolver: ConfigurationResolver) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            resolver.resolve(
                {"auth": {"token": "sk-x"}, "retry_config": {"count": 2, "backoff_factor": 0.5}}
            )
        assert exc_info.value.field == "retry_config"

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            load_connection_config(["auth"])  # type: ignore[arg-type]
        assert exc_info.value.field == "config"


@pytest.mark.unit
class TestOptionalFields:
    @pytest.mark.parametrize("field", OPTIONAL_FIELDS)
    def test_well_shaped_mapping_copied(
        self, resolver: ConfigurationResolver, field: str
    ) -> None:
        resolved = resolver.resolve({"auth": {"token": "sk-x"}, field: WELL_SHAPED[field]})

        assert getattr(resolved, field) == EXPECTED_MODELS[field]
        assert resolved.optional_fields_set == {field}

    @pytest.mark.parametrize("field", OPTIONAL_FIELDS)
    def test_model_instance_copied_by_value(
        self, resolver: ConfigurationResolver, field: str
    ) -> None:
        original = EXPECTED_MODELS[field]
        config = ConnectionConfig(auth={"token": "sk-x"}, **{field: original})

        resolved = resolver.resolve(config)

        assert getattr(resolved, field) == original
        assert getattr(resolved, field) is not original

    @pytest.mark.parametrize("field", OPTIONAL_FIELDS)
    def test_malformed_value_fails_with_field(
        self, resolver: ConfigurationResolver, field: str
    ) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            resolver.resolve({"auth": {"token": "sk-x"}, field: MALFORMED[field]})

        assert exc_info.value.field == field
        assert field in exc_info.value.message
        assert exc_info.value.details["errors"]

    def test_wrong_model_type_rejected(self, resolver: ConfigurationResolver) -> None:
        config = ConnectionConfig(auth={"token": "sk-x"}, proxy=CacheConfig())
        with pytest.raises(ConfigValidationError) as exc_info:
            resolver.resolve(config)
        assert exc_info.value.field == "proxy"

    def test_scalar_for_sub_config_rejected(self, resolver: ConfigurationResolver) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            resolver.resolve({"auth": {"token": "sk-x"}, "proxy": "http://proxy:80"})
        assert exc_info.value.field == "proxy"

    def test_first_failure_aborts(self, resolver: ConfigurationResolver) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            resolver.resolve(
                {
                    "auth": {"token": "sk-x"},
                    "cache": {"capacity": -1},
                    "proxy": {"port": "x"},
                }
            )
        assert exc_info.value.field == "cache"

    def test_all_optional_fields_together(self, resolver: ConfigurationResolver) -> None:
        resolved = resolver.resolve({"auth": {"token": "sk-x"}, **WELL_SHAPED})

        assert resolved.optional_fields_set == set(OPTIONAL_FIELDS)
        assert resolved.http1_settings.keep_alive is KeepAlive.NEVER

    def test_resolution_does_not_mutate_input(self, resolver: ConfigurationResolver) -> None:
        proxy = {"host": "proxy.internal", "port": 3128}
        resolver.resolve({"auth": {"token": "sk-x"}, "proxy": proxy})
        assert proxy == {"host": "proxy.internal", "port": 3128}


@pytest.mark.unit
def test_scenario_malformed_proxy() -> None:
    with pytest.raises(ConfigValidationError) as exc_info:
        resolve_config({"auth": {"token": "sk-x"}, "proxy": {"host": 42, "port": "none"}})
    assert exc_info.value.field == "proxy"


@pytest.mark.unit
def test_resolve_is_repeatable() -> None:
    config = ConnectionConfig(auth={"token": "sk-x"}, cache={"capacity": 4})
    assert resolve_config(config) == resolve_config(config)
