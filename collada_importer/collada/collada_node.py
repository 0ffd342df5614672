# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..core.errors import DuplicateId, MissingElement, StructuralInvariantViolation
from . import collada_util as U
from .collada_camera import Camera
from .collada_geometry import Geometry
from .collada_location import Location
from .collada_skeleton import Skeleton, is_joint, joint_children

class ControllerKind(Enum):
  MODEL = 'model'
  SKIN = 'skin'
  BONE = 'bone'

@dataclass(frozen=True, eq=False)
class Controller:
  kind: ControllerKind
  skin: Any = None
  bone: Any = None

  @staticmethod
  def model():
    return Controller(ControllerKind.MODEL)

  @staticmethod
  def skinned(skin):
    return Controller(ControllerKind.SKIN, skin=skin)

  @staticmethod
  def attached(bone):
    return Controller(ControllerKind.BONE, bone=bone)

class NodeKind(Enum):
  GEOMETRY = 'instance_geometry'
  CAMERA = 'instance_camera'
  CONTROLLER = 'instance_controller'
  LIGHT = 'instance_light'
  SKELETON = 'JOINT'

def classify_node(node_el):
  """Exactly one kind must match; fixed priority order is also the report order."""
  matched = [
    kind for kind in (NodeKind.GEOMETRY, NodeKind.CAMERA, NodeKind.CONTROLLER, NodeKind.LIGHT)
    if U.children(node_el, kind.value)
  ]
  if joint_children(node_el):
    matched.append(NodeKind.SKELETON)

  if not matched:
    raise MissingElement(U.tag_name(node_el), 'instance')
  if len(matched) > 1:
    raise StructuralInvariantViolation(
      f'Node "{node_el.get("name") or node_el.get("id") or ""}" is ambiguous: '
      + ', '.join(k.value for k in matched)
    )
  return matched[0]

@dataclass(frozen=True, eq=False)
class Node:
  id: Optional[str]
  name: str
  location: Location
  joined: Any
  controller: Controller
  parent: Optional[str] = None

  def __repr__(self):
    return f"<Node {self.name} {type(self.joined).__name__} {self.controller.kind.value}>"

class SceneNodes:
  """Name-unique node maps of one scene while it is being assembled."""
  def __init__(self):
    self.geometries = {}
    self.cameras = {}
    self.skeletons = {}

  def add(self, node):
    if node.name in self.geometries or node.name in self.cameras or node.name in self.skeletons:
      raise DuplicateId('scene node', node.name)
    if isinstance(node.joined, Geometry):
      self.geometries[node.name] = node
    elif isinstance(node.joined, Camera):
      self.cameras[node.name] = node
    elif isinstance(node.joined, Skeleton):
      self.skeletons[node.name] = node
    else:
      raise TypeError(f"Unexpected node payload {type(node.joined).__name__}")
    return node

def _instance_url(node_el, kind):
  return U.get_attribute(U.get_element(node_el, kind.value), 'url')

def parse_node(node_el, ctx, nodes, bone=None, parent=None):
  kind = classify_node(node_el)
  if kind == NodeKind.LIGHT:
    return None

  name = U.get_attribute(node_el, 'name')
  location = Location.parse(node_el, ctx.asset, ignore_scale=ctx.config.ignore_node_scale)
  controller = Controller.model() if bone is None else Controller.attached(bone)

  if kind == NodeKind.GEOMETRY:
    joined = ctx.geometries.resolve(_instance_url(node_el, kind))
  elif kind == NodeKind.CAMERA:
    joined = ctx.cameras.resolve(_instance_url(node_el, kind))
  elif kind == NodeKind.CONTROLLER:
    if bone is not None:
      raise StructuralInvariantViolation(f'Skinned node "{name}" can not be attached to bone "{bone.id}"')
    skin = ctx.skins.resolve(_instance_url(node_el, kind))
    joined = ctx.geometries.resolve(skin.geometry_id)
    controller = Controller.skinned(skin)
  else:
    if bone is not None:
      raise StructuralInvariantViolation(f'Skeleton "{name}" can not be nested in bone "{bone.id}"')
    joined = Skeleton.parse(
      joint_children(node_el), ctx.asset,
      parse_child=lambda child_el, b: parse_node(child_el, ctx, nodes, bone=b, parent=name),
    )

  node = nodes.add(Node(
    id=node_el.get('id'),
    name=name,
    location=location,
    joined=joined,
    controller=controller,
    parent=parent,
  ))

  for child_el in U.children(node_el, 'node'):
    if not is_joint(child_el):
      parse_node(child_el, ctx, nodes, bone=bone, parent=name)

  return node
