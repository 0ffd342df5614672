# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from typing import NamedTuple

class TreePrinter(NamedTuple):
  """Indentation context of one tree level. Passed down, never mutated."""
  prefix: str = ''

  def line(self, last, text):
    return f"{self.prefix}{'└── ' if last else '├── '}{text}"

  def child(self, last):
    return TreePrinter(self.prefix + ('    ' if last else '│   '))

def _items(printer, entries, lines):
  """entries: (text, [sub entries]) pairs."""
  for i, (text, sub) in enumerate(entries):
    last = i == len(entries) - 1
    lines.append(printer.line(last, text))
    _items(printer.child(last), sub, lines)

def _geometry_entries(document):
  out = []
  for geometry in document.geometries.values():
    meshes = []
    for mesh in geometry.meshes:
      layers = [(f'Layer "{k}" source id:"{s.source.id}"', []) for k, s in mesh.vertex_indices.items()]
      meshes.append((
        f'Mesh material:"{mesh.material}" polygons:{len(mesh.polygons)}' if mesh.material else
        f'Mesh no material polygons:{len(mesh.polygons)}',
        [(f"Vertex format: {mesh.vertex_format}", []), ("Vertex", layers)],
      ))
    out.append((f'Geometry id:"{geometry.id}" name:"{geometry.name}"', meshes))
  return out

def _bone_entries(skeleton, parent):
  return [
    (f'Bone "{b.id}" index:{b.index}', _bone_entries(skeleton, b.index))
    for b in skeleton.bones if b.parent == parent
  ]

def _node_entry(node):
  joined = node.joined
  ctrl = node.controller.kind.value
  if node.controller.bone is not None:
    ctrl = f'{ctrl} "{node.controller.bone.id}"'
  elif node.controller.skin is not None:
    ctrl = f'{ctrl} "{node.controller.skin.id}"'
  sub = _bone_entries(joined, None) if hasattr(joined, 'bones') else []
  label = getattr(joined, 'id', None) or f"{len(joined)} bones"
  return (f'Node "{node.name}" {type(joined).__name__} "{label}" controller:{ctrl}', sub)

def format_tree(document):
  a = document.asset
  sections = [
    (f"Asset up_axis:{a.up_axis.value} unit:{a.unit.name}({a.unit.ratio}) editor:{a.editor.value}", []),
    ("Geometries", _geometry_entries(document)),
    ("Cameras", [(f'Camera id:"{c.id}" {type(c.projection).__name__}', []) for c in document.cameras.values()]),
    ("Controllers", [(f'Skin id:"{s.id}" for geometry with id "{s.geometry_id}"', []) for s in document.controllers.values()]),
    ("Animations", [(f'Animation id:"{an.id}" bone:"{an.bone_id}" samples:{an.samples_count}', [])
                    for an in document.animations.values()]),
    ("Scenes", [(f'Scene id:"{s.id}"', [_node_entry(n) for n in s.nodes.values()]) for s in document.scenes.values()]),
  ]
  lines = ["Document"]
  _items(TreePrinter(), sections, lines)
  return '\n'.join(lines)

def print_tree(document):
  print(format_tree(document))
