# tests/core/test_k8s_client.py

from unittest.mock import AsyncMock, MagicMock

import pytest
from kubernetes_asyncio.config import ConfigException

import cranectl.core.k8s_client as k8s_client

MODULE = "cranectl.core.k8s_client"


@pytest.fixture(autouse=True)
def reset_loaded_flag(monkeypatch):
    monkeypatch.setattr(k8s_client, "_CONFIG_LOADED", False)


@pytest.mark.asyncio
async def test_in_cluster_config_is_tried_first(mocker):
    incluster = mocker.patch(f"{MODULE}.k8s_config.load_incluster_config")
    kubeconfig = mocker.patch(f"{MODULE}.k8s_config.load_kube_config", new=AsyncMock())

    assert await k8s_client.ensure_k8s_config() is True

    incluster.assert_called_once()
    kubeconfig.assert_not_awaited()


@pytest.mark.asyncio
async def test_falls_back_to_kubeconfig(mocker):
    mocker.patch(f"{MODULE}.k8s_config.load_incluster_config", side_effect=ConfigException("not in cluster"))
    kubeconfig = mocker.patch(f"{MODULE}.k8s_config.load_kube_config", new=AsyncMock())

    assert await k8s_client.ensure_k8s_config() is True

    kubeconfig.assert_awaited_once_with(config_file=None, context=None)


@pytest.mark.asyncio
async def test_explicit_context_skips_in_cluster(mocker, monkeypatch):
    monkeypatch.setenv("KUBE_CONTEXT", "staging")
    incluster = mocker.patch(f"{MODULE}.k8s_config.load_incluster_config")
    kubeconfig = mocker.patch(f"{MODULE}.k8s_config.load_kube_config", new=AsyncMock())

    assert await k8s_client.ensure_k8s_config() is True

    incluster.assert_not_called()
    kubeconfig.assert_awaited_once_with(config_file=None, context="staging")


@pytest.mark.asyncio
async def test_no_configuration_available(mocker):
    mocker.patch(f"{MODULE}.k8s_config.load_incluster_config", side_effect=ConfigException("no"))
    mocker.patch(f"{MODULE}.k8s_config.load_kube_config", new=AsyncMock(side_effect=ConfigException("no")))

    assert await k8s_client.ensure_k8s_config() is False
    assert await k8s_client.get_api_client() is None


@pytest.mark.asyncio
async def test_bearer_token_overrides_credentials(mocker, monkeypatch):
    mocker.patch(f"{MODULE}.ensure_k8s_config", new=AsyncMock(return_value=True))
    api_client = MagicMock()
    api_client.configuration.api_key = {}
    mocker.patch(f"{MODULE}.client.ApiClient", return_value=api_client)
    monkeypatch.setattr(k8s_client.config, "KUBE_BEARER_TOKEN", "s3cr3t")

    assert await k8s_client.get_api_client() is api_client
    assert api_client.configuration.api_key["authorization"] == "Bearer s3cr3t"
