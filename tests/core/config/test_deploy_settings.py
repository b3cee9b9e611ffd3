# tests/core/config/test_deploy_settings.py
"""
Testes de `DeploySettings.from_config`.

Invariantes:
    - Chaves ausentes caem nos defaults documentados
    - Backend desconhecido é erro de configuração
    - `public_base_url` sempre termina com "/"
"""

import pytest

try:
    from quadlet_deploy.core.config.errors import ConfigError
    from quadlet_deploy.core.config.settings import DeploySettings
except Exception as e:  # noqa: BLE001
    DeploySettings = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing DeploySettings: {_IMPORT_ERR}")


def test_defaults_when_config_is_empty():
    _require_imports()
    s = DeploySettings.from_config({})
    assert s.schema_version == "0.2.0"
    assert s.public_base_url == "https://static.leger.run/"
    assert s.storage_backend == "local"
    assert s.storage_root_dir == "artifacts"
    assert s.storage_bucket is None


def test_s3_backend_reads_bucket_and_endpoint():
    _require_imports()
    s = DeploySettings.from_config(
        {
            "deploy": {"public_base_url": "https://cdn.example.org"},
            "storage": {
                "backend": "s3",
                "bucket": "leger-static",
                "endpoint_url": "https://acc.r2.cloudflarestorage.com",
            },
        }
    )
    assert s.storage_backend == "s3"
    assert s.storage_bucket == "leger-static"
    assert s.storage_endpoint_url == "https://acc.r2.cloudflarestorage.com"
    assert s.public_base_url == "https://cdn.example.org/"


def test_s3_without_bucket_raises():
    """
    Verifica que `backend=s3` exige bucket.

    Decisões arquiteturais:
        - Sem fallback silencioso para o backend local
    """
    _require_imports()
    with pytest.raises(ConfigError, match="bucket"):
        DeploySettings.from_config({"storage": {"backend": "s3"}})


def test_unknown_backend_raises():
    _require_imports()
    with pytest.raises(ConfigError, match="storage.backend"):
        DeploySettings.from_config({"storage": {"backend": "ftp"}})
