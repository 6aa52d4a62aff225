"""Core interfaces (ports) for dependency injection."""

from finsight.core.interfaces.cache import IInsightCache
from finsight.core.interfaces.llm import ErrorClassification, IModelGateway, ModelProvider
from finsight.core.interfaces.storage import (
    IBudgetStore,
    IInsightStore,
    ISettingsStore,
    ITransactionStore,
)

__all__ = [
    "ErrorClassification",
    "IBudgetStore",
    "IInsightCache",
    "IInsightStore",
    "IModelGateway",
    "ISettingsStore",
    "ITransactionStore",
    "ModelProvider",
]
