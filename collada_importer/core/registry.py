# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from collections.abc import Mapping

from .errors import DuplicateId, UnresolvedReference

def strip_url(url: str) -> str:
  if url.startswith('#'):
    return url[1:]
  return url

class Registry(Mapping):
  """
  ID -> shared entity map of one library scope.
  Filled once while its library is parsed, read-only after freeze().
  """
  def __init__(self, scope):
    self.scope = scope
    self._items = {}
    self._frozen = False

  def insert(self, id, entity):
    if self._frozen:
      raise RuntimeError(f"{self.scope} registry is frozen")
    if id in self._items:
      raise DuplicateId(self.scope, id)
    self._items[id] = entity
    return entity

  def freeze(self):
    self._frozen = True
    return self

  @property
  def frozen(self):
    return self._frozen

  def resolve(self, url):
    """Look up a '#id' or bare 'id' reference."""
    id = strip_url(url)
    entity = self._items.get(id)
    if entity is None:
      raise UnresolvedReference(self.scope, id)
    return entity

  def __getitem__(self, id):
    return self._items[id]

  def __iter__(self):
    return iter(self._items)

  def __len__(self):
    return len(self._items)

  def __repr__(self):
    return f"<Registry {self.scope} size={len(self._items)}>"
