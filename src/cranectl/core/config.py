# src/cranectl/core/config.py

import logging
import os

from dotenv import load_dotenv

# Load environment variables from a .env file located in the project root
dotenv_path = os.path.join(os.path.dirname(__file__), "..", "..", "..", ".env")
load_dotenv(dotenv_path=dotenv_path)


class Config:
    """
    Handles the application's configuration by loading values from environment variables.
    """

    def __init__(self):
        # --- Cluster credentials ---
        self.KUBE_BEARER_TOKEN = self._get_secret("KUBE_BEARER_TOKEN")

    @staticmethod
    def _get_secret(key: str, default: str = None) -> str:
        """
        Retrieves a secret from a file (mounted secret volume) or falls back to environment variable.

        Raises:
            PermissionError: If the secret file exists but cannot be read due to permissions.
            IOError: If the secret file exists but cannot be read due to I/O errors.
        """
        secret_file = f"/etc/cranectl/secrets/{key}"
        if os.path.exists(secret_file):
            try:
                with open(secret_file, "r") as f:
                    value = f.read().strip()
                    logging.getLogger(__name__).debug(f"Loaded secret '{key}' from {secret_file}")
                    return value
            except PermissionError as e:
                raise PermissionError(
                    f"Secret file '{secret_file}' exists but cannot be read due to permission denied. "
                    f"Please check file permissions or run with appropriate privileges."
                ) from e
            except (IOError, OSError) as e:
                raise IOError(
                    f"Secret file '{secret_file}' exists but cannot be read: {e}. "
                    f"Please check the file integrity and system resources."
                ) from e
        return os.getenv(key, default)

    # --- Logging variables ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # --- Cluster connection variables ---
    # KUBECONFIG and KUBE_CONTEXT are resolved at access time so tests and
    # wrappers can change them after import.
    @property
    def KUBECONFIG(self):
        return os.getenv("KUBECONFIG") or None

    @property
    def KUBE_CONTEXT(self):
        return os.getenv("KUBE_CONTEXT") or None

    K8S_REQUEST_TIMEOUT = float(os.getenv("K8S_REQUEST_TIMEOUT", "30"))

    # Namespace used when a command is run without --namespace
    CRANE_NAMESPACE = os.getenv("CRANE_NAMESPACE", "default")

    # --- Recommendation custom resource coordinates ---
    RECOMMENDATION_GROUP = os.getenv("RECOMMENDATION_GROUP", "analysis.crane.io")
    RECOMMENDATION_VERSION = os.getenv("RECOMMENDATION_VERSION", "v1alpha1")
    RECOMMENDATION_PLURAL = os.getenv("RECOMMENDATION_PLURAL", "recommendations")
    RECOMMENDATION_RULE_PLURAL = os.getenv("RECOMMENDATION_RULE_PLURAL", "recommendationrules")

    @property
    def RECOMMENDATION_API_VERSION(self) -> str:
        return f"{self.RECOMMENDATION_GROUP}/{self.RECOMMENDATION_VERSION}"

    def validate_instance(self):
        if self.LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR or CRITICAL.")
        if self.K8S_REQUEST_TIMEOUT <= 0:
            raise ValueError("K8S_REQUEST_TIMEOUT must be a positive number of seconds.")
        if not self.RECOMMENDATION_GROUP or not self.RECOMMENDATION_VERSION:
            raise ValueError("RECOMMENDATION_GROUP and RECOMMENDATION_VERSION must be set.")
        if self.KUBECONFIG and not os.path.exists(self.KUBECONFIG):
            logging.warning("KUBECONFIG points to '%s' which does not exist.", self.KUBECONFIG)


# Instantiate the config to be imported by other modules
config = Config()
config.validate_instance()
