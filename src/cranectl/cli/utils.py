# src/cranectl/cli/utils.py
import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from ..core.config import config
from ..core.factory import get_processor
from ..core.processor import RecommendationProcessor

logger = logging.getLogger(__name__)

T = TypeVar("T")


def resolve_namespace(namespace: Optional[str], all_namespaces: bool = False, default: Optional[str] = None) -> str:
    """
    Picks the namespace a command works on. "" means all namespaces.
    """
    if all_namespaces:
        return ""
    if namespace:
        return namespace
    return config.CRANE_NAMESPACE if default is None else default


def run_with_processor(action: Callable[[RecommendationProcessor], Awaitable[T]]) -> T:
    """
    Runs ``action`` on a fresh processor inside its own event loop and
    closes the cluster client afterwards.
    """

    async def _run():
        processor = get_processor()
        try:
            return await action(processor)
        finally:
            await processor.gateway.close()

    return asyncio.run(_run())
