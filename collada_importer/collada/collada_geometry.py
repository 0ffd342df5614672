# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from dataclasses import dataclass
from typing import Dict, NamedTuple, Optional, Tuple

from ..core.errors import StructuralInvariantViolation
from ..core.registry import Registry
from . import collada_util as U
from .collada_parse import IndexStream, build_streams, read_element_table, read_index_streams, select_inputs
from .collada_reader import Source, read_sources

UNSUPPORTED_PRIMITIVES = ('triangles', 'tristrips', 'trifans', 'polygons', 'lines', 'linestrips')

class Polygon(NamedTuple):
  first_vertex_index: int
  vertices_count: int

def vertex_format_of(inputs):
  return ' '.join(f"{semantic}:&({source.format})" for semantic, source in inputs)

@dataclass(frozen=True, eq=False)
class Mesh:
  """One <polylist>: the faces of a geometry that share a material."""
  material: Optional[str]
  vertex_format: str
  inputs: Tuple[Tuple[str, Source], ...]
  polygons: Tuple[Polygon, ...]
  vertex_indices: Dict[str, IndexStream]

  @property
  def vertices_count(self):
    return sum(p.vertices_count for p in self.polygons)

  def polygon_indices(self, polygon_index, semantic):
    polygon = self.polygons[polygon_index]
    start = polygon.first_vertex_index
    return self.vertex_indices[semantic].indices[start:start + polygon.vertices_count]

  @staticmethod
  def parse(polylist_el, sources):
    inputs = select_inputs(polylist_el, sources)
    table, vertices_count = read_element_table(polylist_el, 'vcount')
    arrays = read_index_streams(polylist_el, 'p', vertices_count, len(inputs))

    return Mesh(
      material=polylist_el.get('material'),
      vertex_format=vertex_format_of(inputs),
      inputs=tuple(inputs),
      polygons=tuple(Polygon(e.first, e.size) for e in table),
      vertex_indices=build_streams(inputs, arrays),
    )

@dataclass(frozen=True, eq=False)
class Geometry:
  id: str
  name: str
  meshes: Tuple[Mesh, ...]
  sources: Registry

  def __repr__(self):
    return f"<Geometry {self.id} meshes={len(self.meshes)}>"

  @staticmethod
  def parse(geometry_el, asset):
    id = U.get_attribute(geometry_el, 'id')
    name = geometry_el.get('name') or id

    mesh_el = U.get_element(geometry_el, 'mesh')
    sources = read_sources(mesh_el, asset)

    meshes = []
    for prim in mesh_el:
      t = U.tag_name(prim)
      if t == 'polylist':
        meshes.append(Mesh.parse(prim, sources))
      elif t in UNSUPPORTED_PRIMITIVES:
        raise StructuralInvariantViolation(f'Geometry "{id}": <{t}> is not supported, expected <polylist>')

    return Geometry(id=id, name=name, meshes=tuple(meshes), sources=sources)

def parse_geometries(root, asset):
  geometries = Registry('geometry')
  library = U.find_element(root, 'library_geometries')
  if library is not None:
    for geometry_el in U.children(library, 'geometry'):
      geometry = Geometry.parse(geometry_el, asset)
      geometries.insert(geometry.id, geometry)
  return geometries.freeze()
