"""Key-storage engine: typed fixed-capacity arrays with traced searches."""

from keysearch.core.errors import ConfigurationError, KeyStoreError
from keysearch.core.store import KeyStore
from keysearch.core.trace import OperationResult, SearchResult, Step, StepAction
from keysearch.core.types import CollisionStrategy, DataType, HashMethod, SearchMethod

__all__ = [
  "CollisionStrategy",
  "ConfigurationError",
  "DataType",
  "HashMethod",
  "KeyStore",
  "KeyStoreError",
  "OperationResult",
  "SearchMethod",
  "SearchResult",
  "Step",
  "StepAction",
]
