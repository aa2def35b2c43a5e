"""Error taxonomy for the key-storage engine.

Every error except ConfigurationError is recoverable: public KeyStore
operations catch them and report the message in a result object.
ConfigurationError signals a caller bug (unknown variant name) and always
propagates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
  from keysearch.core.trace import Trace


class KeyStoreError(Exception):
  """Base class for engine errors that carry a short machine-readable code.

  ``steps`` holds the partial trace recorded before the failure, so a failed
  probe sequence can still be replayed.
  """

  code = "KeyStoreError"

  def __init__(
    self, message: str, code: str | None = None, steps: Trace = ()
  ) -> None:
    super().__init__(message)
    self.message = message
    self.steps = steps
    if code is not None:
      self.code = code


class KeyValidationError(KeyStoreError):
  """Raw key failed grammar, length or duplicate checks."""

  code = "InvalidKey"


class CapacityError(KeyStoreError):
  """The array or hash table has no room left."""

  code = "TableFull"


class StateError(KeyStoreError):
  """Operation not valid in the current lifecycle state."""

  code = "NotCreated"


class NotFoundError(KeyStoreError):
  """Key is not present."""

  code = "NotFound"


class ConfigurationError(ValueError):
  """Unknown hash method, collision strategy or data type name."""
