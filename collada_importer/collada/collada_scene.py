# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from dataclasses import dataclass
from typing import Dict

from ..core.registry import Registry
from . import collada_util as U
from .collada_node import Node, SceneNodes, parse_node

@dataclass(frozen=True, eq=False)
class Scene:
  id: str
  name: str
  geometries: Dict[str, Node]
  cameras: Dict[str, Node]
  skeletons: Dict[str, Node]

  def __repr__(self):
    return (f"<Scene {self.id} geometries={len(self.geometries)} "
            f"cameras={len(self.cameras)} skeletons={len(self.skeletons)}>")

  def node(self, name):
    return self.geometries.get(name) or self.cameras.get(name) or self.skeletons.get(name)

  @property
  def nodes(self):
    return {**self.geometries, **self.cameras, **self.skeletons}

  @staticmethod
  def parse(scene_el, ctx):
    id = U.get_attribute(scene_el, 'id')
    nodes = SceneNodes()
    for node_el in U.children(scene_el, 'node'):
      parse_node(node_el, ctx, nodes)
    return Scene(
      id=id,
      name=scene_el.get('name') or id,
      geometries=nodes.geometries,
      cameras=nodes.cameras,
      skeletons=nodes.skeletons,
    )

def parse_scenes(root, ctx):
  scenes = Registry('visual_scene')
  library = U.find_element(root, 'library_visual_scenes')
  if library is not None:
    for scene_el in U.children(library, 'visual_scene'):
      scene = Scene.parse(scene_el, ctx)
      scenes.insert(scene.id, scene)
  return scenes.freeze()

def resolve_active_scene(root, scenes):
  scene_el = U.find_element(root, 'scene')
  if scene_el is None:
    return None
  instance = U.find_element(scene_el, 'instance_visual_scene')
  if instance is None:
    return None
  return scenes.resolve(U.get_attribute(instance, 'url'))
