# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from dataclasses import dataclass
from typing import Any, NamedTuple

from ..core.errors import CardinalityMismatch, StructuralInvariantViolation, UnexpectedEndOfData
from . import collada_util as U

class IndexedElement(NamedTuple):
  """One polygon (vertex count) or one skinned vertex (influence count)."""
  first: int
  size: int

@dataclass(frozen=True, eq=False)
class IndexStream:
  source: Any
  indices: Any

  def __len__(self):
    return len(self.indices)

def input_key(semantic, set_value):
  if set_value is None:
    return semantic
  set_idx = U.parse_usize(set_value, f"{semantic} set")
  return semantic if set_idx == 0 else f"{semantic}{set_idx}"

def select_inputs(element, sources):
  """
  Ordered (key, Source) list of the offset-tagged <input> children.
  Offsets must be declared as 0, 1, ... n-1.
  """
  inputs = []
  for input_el in U.children(element, 'input'):
    semantic = U.get_attribute(input_el, 'semantic')
    offset = U.parse_attribute_as_usize(input_el, 'offset')
    if offset != len(inputs):
      raise StructuralInvariantViolation(
        f'<{U.tag_name(element)}> input "{semantic}": expected offset {len(inputs)}, but {offset} has been found'
      )
    key = input_key(semantic, input_el.get('set'))
    if any(k == key for k, _ in inputs):
      raise StructuralInvariantViolation(f'<{U.tag_name(element)}> has duplicate input "{key}"')
    source = sources.resolve(U.get_attribute(input_el, 'source'))
    inputs.append((key, source))

  if not inputs:
    raise StructuralInvariantViolation(f'<{U.tag_name(element)}> declares no inputs')
  return inputs

def _read_tokens(element, tag, expected):
  el = U.get_element(element, tag)
  text = (el.text or '') if expected == 0 else U.get_text(el)
  return U.split_tokens(text)

def read_element_table(element, sizes_tag='vcount'):
  """
  Reads the size-per-element array.
  Returns ((first, size) per element, total flattened length).
  """
  count = U.parse_attribute_as_usize(element, 'count')
  tokens = _read_tokens(element, sizes_tag, count)
  if len(tokens) < count:
    raise UnexpectedEndOfData(f"Only {len(tokens)} values of <{sizes_tag}> have been read, expected {count}")
  if len(tokens) > count:
    raise CardinalityMismatch(f"<{sizes_tag}> holds {len(tokens)} values, but count is {count}")

  sizes = U.parse_usizes_np(tokens, sizes_tag)
  table = []
  total = 0
  for size in sizes.tolist():
    table.append(IndexedElement(total, size))
    total += size
  return tuple(table), total

def read_index_streams(element, data_tag, total, stream_count):
  """De-interleaves the flattened buffer: token k belongs to stream k % stream_count."""
  expected = total * stream_count
  tokens = _read_tokens(element, data_tag, expected)
  if len(tokens) < expected:
    raise UnexpectedEndOfData(f"Only {len(tokens)} values of <{data_tag}> have been read, expected {expected}")
  if len(tokens) > expected:
    raise CardinalityMismatch(f"<{data_tag}> holds {len(tokens)} values, expected {expected}")

  values = U.parse_usizes_np(tokens, data_tag).reshape(total, stream_count)
  return [U.freeze_array(values[:, i].copy()) for i in range(stream_count)]

def build_streams(inputs, arrays):
  streams = {}
  for (key, source), indices in zip(inputs, arrays):
    if indices.size and int(indices.max()) >= source.count:
      raise CardinalityMismatch(
        f'Index {int(indices.max())} of "{key}" is out of source "{source.id}" range ({source.count})'
      )
    streams[key] = IndexStream(source, indices)
  return streams
