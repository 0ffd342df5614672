# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from dataclasses import dataclass
from typing import Dict, NamedTuple, Tuple

from ..core.errors import CardinalityMismatch, StructuralInvariantViolation
from ..core.registry import Registry, strip_url
from . import collada_util as U
from .collada_location import Matrix
from .collada_parse import IndexStream, build_streams, read_element_table, read_index_streams, select_inputs
from .collada_reader import Source, read_sources, select_named_sources

class BonesPerVertex(NamedTuple):
  first_bone_index: int
  bones_count: int

def _first_layer(source):
  return next(iter(source.layers.values()))

@dataclass(frozen=True, eq=False)
class Skin:
  id: str
  geometry_id: str
  bind_shape_matrix: Matrix
  inputs: Tuple[Tuple[str, Source], ...]
  joint_sources: Dict[str, Source]
  vertices: Tuple[BonesPerVertex, ...]
  bone_indices: Dict[str, IndexStream]
  max_bones_per_vertex: int
  sources: Registry

  def __repr__(self):
    return f'<Skin {self.id} for geometry "{self.geometry_id}">'

  @property
  def joint_names(self):
    return _first_layer(self.joint_sources['JOINT']).data

  @property
  def bind_matrices(self):
    return _first_layer(self.joint_sources['INV_BIND_MATRIX']).data

  def vertex_influences(self, vertex):
    """(bone name, weight) pairs of one vertex, in declaration order."""
    entry = self.vertices[vertex]
    start, end = entry.first_bone_index, entry.first_bone_index + entry.bones_count
    joints = self.bone_indices['JOINT']
    weights = self.bone_indices['WEIGHT']
    names = _first_layer(joints.source).data
    values = _first_layer(weights.source).data
    return tuple(
      (names[int(j)], float(values[int(w)]))
      for j, w in zip(joints.indices[start:end], weights.indices[start:end])
    )

  @staticmethod
  def parse(controller_el, asset):
    id = U.get_attribute(controller_el, 'id')
    skin_el = U.get_element(controller_el, 'skin')
    geometry_id = strip_url(U.get_attribute(skin_el, 'source'))

    bind_el = U.find_element(skin_el, 'bind_shape_matrix')
    bind_shape_matrix = Matrix.identity() if bind_el is None else Matrix.parse(U.get_text(bind_el), 'bind_shape_matrix')

    sources = read_sources(skin_el, asset)

    joints_el = U.get_element(skin_el, 'joints')
    joint_sources = select_named_sources(joints_el, sources, 'joints')
    for semantic in ('JOINT', 'INV_BIND_MATRIX'):
      if semantic not in joint_sources:
        raise StructuralInvariantViolation(f'Skin "{id}": <joints> has no {semantic} input')
    bones_count = joint_sources['JOINT'].count
    matrices_count = joint_sources['INV_BIND_MATRIX'].count
    if bones_count != matrices_count:
      raise CardinalityMismatch(
        f'Skin "{id}": count of bones ({bones_count}) and count of matrices ({matrices_count}) mismatch'
      )

    weights_el = U.get_element(skin_el, 'vertex_weights')
    inputs = select_inputs(weights_el, sources)
    for semantic in ('JOINT', 'WEIGHT'):
      if not any(key == semantic for key, _ in inputs):
        raise StructuralInvariantViolation(f'Skin "{id}": <vertex_weights> has no {semantic} input')

    table, influences_count = read_element_table(weights_el, 'vcount')
    arrays = read_index_streams(weights_el, 'v', influences_count, len(inputs))

    max_bones = max((e.size for e in table), default=0)
    if max_bones == 0:
      raise StructuralInvariantViolation(f'Skin "{id}": max bones count per vertex == 0')

    return Skin(
      id=id,
      geometry_id=geometry_id,
      bind_shape_matrix=bind_shape_matrix,
      inputs=tuple(inputs),
      joint_sources=joint_sources,
      vertices=tuple(BonesPerVertex(e.first, e.size) for e in table),
      bone_indices=build_streams(inputs, arrays),
      max_bones_per_vertex=max_bones,
      sources=sources,
    )

def parse_controllers(root, asset):
  skins = Registry('controller')
  library = U.find_element(root, 'library_controllers')
  if library is not None:
    for controller_el in U.children(library, 'controller'):
      skin = Skin.parse(controller_el, asset)
      skins.insert(skin.id, skin)
  return skins.freeze()
