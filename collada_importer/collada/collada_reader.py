# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from dataclasses import dataclass
from typing import Any, Dict

import numpy as np

from ..core.errors import CardinalityMismatch, StructuralInvariantViolation, UnexpectedEndOfData
from ..core.registry import Registry
from .collada_location import remap_axis_name
from . import collada_util as U

# accessor param name -> layer key (X/Y/Z are additionally remapped by up axis)
LAYER_KEYS = {
  'X': 'X', 'Y': 'Y', 'Z': 'Z',
  'S': 'U', 'T': 'V', 'U': 'U', 'V': 'V',
  'R': 'R', 'G': 'G', 'B': 'B', 'A': 'A',
  'JOINT': 'JOINT',
  'TRANSFORM': 'TRANSFORM',
  'WEIGHT': 'WEIGHT',
}

# param type -> (layer kind, slots occupied per element)
PARAM_TYPES = {
  'float': ('float', 1),
  'double': ('float', 1),
  'int': ('int', 1),
  'name': ('name', 1),
  'Name': ('name', 1),
  'IDREF': ('name', 1),
  'float4x4': ('float4x4', 16),
}

# array element -> layer kinds it can feed
ARRAY_KINDS = {
  'float_array': ('float', 'float4x4'),
  'int_array': ('int',),
  'Name_array': ('name',),
  'IDREF_array': ('name',),
}

@dataclass(frozen=True, eq=False)
class SourceLayer:
  key: str
  kind: str
  data: Any

  def __len__(self):
    return len(self.data)

@dataclass(frozen=True, eq=False)
class Source:
  id: str
  count: int
  layers: Dict[str, SourceLayer]
  format: str

  def layer(self, key):
    return self.layers[key]

  def __repr__(self):
    return f"<Source {self.id} count={self.count} format='{self.format}'>"

  @staticmethod
  def parse(source_el, asset):
    id = U.get_attribute(source_el, 'id')

    array_el = None
    for name in ARRAY_KINDS:
      found = U.find_element(source_el, name)
      if found is not None:
        if array_el is not None:
          raise StructuralInvariantViolation(f'Source "{id}" has more than one data array')
        array_el = found
    if array_el is None:
      raise StructuralInvariantViolation(f'Source "{id}" has no data array')
    array_name = U.tag_name(array_el)
    array_count = U.parse_attribute_as_usize(array_el, 'count')

    accessor = U.get_element(U.get_element(source_el, 'technique_common'), 'accessor')
    accessor_count = U.parse_attribute_as_usize(accessor, 'count')
    accessor_stride = U.parse_attribute_as_usize(accessor, 'stride')

    params = []
    for param_el in U.children(accessor, 'param'):
      param_name = U.get_attribute(param_el, 'name')
      param_type = U.get_attribute(param_el, 'type')
      if param_type not in PARAM_TYPES:
        raise StructuralInvariantViolation(f'Source "{id}": unsupported param type "{param_type}"')
      kind, size = PARAM_TYPES[param_type]
      if kind not in ARRAY_KINDS[array_name]:
        raise StructuralInvariantViolation(f'Source "{id}": param of type {param_type} can not be read from {array_name}')
      key = LAYER_KEYS.get(param_name, param_name)
      if kind in ('float', 'int'):
        key = remap_axis_name(key, asset.up_axis)
      params.append((key, kind, size))

    if not params:
      raise StructuralInvariantViolation(f'Source "{id}" is empty')

    stride = sum(size for _, _, size in params)
    if accessor_stride != stride:
      raise CardinalityMismatch(f'Source "{id}": stride({accessor_stride}) != size of params({stride})')
    if accessor_count * accessor_stride != array_count:
      raise CardinalityMismatch(
        f'Source "{id}": count({accessor_count})*stride({accessor_stride}) != {array_name} count({array_count})'
      )

    tokens = U.split_tokens(array_el.text or '') if array_count == 0 else U.split_tokens(U.get_text(array_el))
    if len(tokens) < array_count:
      raise UnexpectedEndOfData(f'Only {len(tokens)} values of {array_name} "{id}" have been read, expected {array_count}')
    if len(tokens) > array_count:
      raise CardinalityMismatch(f'{array_name} of source "{id}" holds {len(tokens)} values, declared {array_count}')

    if array_name == 'float_array':
      flat = U.parse_floats_np(tokens, f'source "{id}" value').reshape(accessor_count, accessor_stride)
    elif array_name == 'int_array':
      flat = U.parse_ints_np(tokens, f'source "{id}" value', dtype=np.int32).reshape(accessor_count, accessor_stride)
    else:
      flat = [tokens[i:i + accessor_stride] for i in range(0, len(tokens), accessor_stride)]

    layers = {}
    slot = 0
    for key, kind, size in params:
      if key in layers:
        raise StructuralInvariantViolation(f'Source "{id}" declares layer "{key}" twice')
      if kind == 'name':
        data = tuple(row[slot] for row in flat)
      elif kind == 'float4x4':
        data = np.ascontiguousarray(flat[:, slot:slot + size]).reshape(accessor_count, 4, 4)
      else:
        data = np.ascontiguousarray(flat[:, slot])
        if key == 'X' and asset.left_handed:
          data = -data
      if isinstance(data, np.ndarray):
        data = U.freeze_array(data)
      layers[key] = SourceLayer(key, kind, data)
      slot += size

    fmt = ' '.join(f"{layer.key}:{layer.kind}" for layer in layers.values())
    return Source(id=id, count=accessor_count, layers=layers, format=fmt)

def read_sources(element, asset, scope='source'):
  """All <source> children of element plus their <vertices> synonyms."""
  sources = Registry(scope)
  for source_el in U.children(element, 'source'):
    source = Source.parse(source_el, asset)
    sources.insert(source.id, source)

  for synonym_el in U.children(element, 'vertices'):
    resolve_synonym(synonym_el, sources)

  return sources.freeze()

def resolve_synonym(synonym_el, sources):
  new_id = U.get_attribute(synonym_el, 'id')
  input_el = U.get_element(synonym_el, 'input')
  source = sources.resolve(U.get_attribute(input_el, 'source'))
  return sources.insert(new_id, source)

def select_named_sources(element, sources, scope):
  """semantic -> Source for every <input> of element (no offsets)."""
  selected = {}
  for input_el in U.children(element, 'input'):
    semantic = U.get_attribute(input_el, 'semantic')
    source = sources.resolve(U.get_attribute(input_el, 'source'))
    if semantic in selected:
      raise StructuralInvariantViolation(f'Duplicate {scope} input with semantic "{semantic}"')
    selected[semantic] = source
  return selected
