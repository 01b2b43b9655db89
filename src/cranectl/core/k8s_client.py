import asyncio
import logging
import typing

from kubernetes_asyncio import client, config as k8s_config

from .config import config

logger = logging.getLogger(__name__)

# Global lock to prevent race conditions during config loading
_CONFIG_LOCK = asyncio.Lock()
_CONFIG_LOADED = False


async def ensure_k8s_config() -> bool:
    """
    Ensures that the Kubernetes configuration is loaded exactly once.

    An explicit KUBECONFIG or KUBE_CONTEXT wins; otherwise the in-cluster
    service account is tried before the default kubeconfig file.

    Returns:
        bool: True if config was loaded successfully (or was already loaded), False otherwise.
    """
    global _CONFIG_LOADED

    if _CONFIG_LOADED:
        return True

    async with _CONFIG_LOCK:
        # Double-check locking pattern
        if _CONFIG_LOADED:
            return True

        explicit = bool(config.KUBECONFIG or config.KUBE_CONTEXT)

        if not explicit:
            try:
                logger.debug("Attempting to load in-cluster Kubernetes config...")
                k8s_config.load_incluster_config()
                logger.info("Loaded in-cluster Kubernetes configuration.")
                _CONFIG_LOADED = True
                return True
            except k8s_config.ConfigException:
                logger.debug("In-cluster config not found.")
            except Exception as e:
                logger.warning(f"Unexpected error loading in-cluster config: {e}")

        try:
            logger.debug("Attempting to load kubeconfig...")
            await k8s_config.load_kube_config(config_file=config.KUBECONFIG, context=config.KUBE_CONTEXT)
            logger.debug("Loaded Kubernetes configuration from kubeconfig file.")
            _CONFIG_LOADED = True
            return True
        except k8s_config.ConfigException as e:
            logger.warning(f"Could not load kubeconfig: {e}")
        except Exception as e:
            logger.warning(f"Unexpected error loading kubeconfig: {e}")

    logger.warning("Failed to load any Kubernetes configuration.")
    return False


async def get_api_client() -> typing.Optional[client.ApiClient]:
    """
    Returns a configured ApiClient, or None when no cluster configuration is available.
    A KUBE_BEARER_TOKEN overrides the credentials from the loaded configuration.
    """
    if not await ensure_k8s_config():
        return None
    api_client = client.ApiClient()
    if config.KUBE_BEARER_TOKEN:
        api_client.configuration.api_key["authorization"] = f"Bearer {config.KUBE_BEARER_TOKEN}"
    return api_client
