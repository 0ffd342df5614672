# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..core.errors import DuplicateId, StructuralInvariantViolation
from . import collada_util as U
from .collada_location import Location

def is_joint(node_el):
  return U.tag_name(node_el) == 'node' and node_el.get('type') == 'JOINT'

def joint_children(node_el):
  return [c for c in U.children(node_el, 'node') if c.get('type') == 'JOINT']

@dataclass(frozen=True, eq=False)
class Bone:
  id: str
  sid: Optional[str]
  name: str
  index: int
  parent: Optional[int]
  location: Location

  def __repr__(self):
    return f"<Bone {self.index} {self.id} parent={self.parent}>"

@dataclass(frozen=True, eq=False)
class Skeleton:
  """Flat bone array in pre-order; a parent always precedes its children."""
  bones: Tuple[Bone, ...]
  bones_by_id: Dict[str, Bone]

  def __len__(self):
    return len(self.bones)

  def __repr__(self):
    return f"<Skeleton bones={len(self.bones)}>"

  @property
  def roots(self):
    return tuple(b for b in self.bones if b.parent is None)

  def children_of(self, bone):
    return tuple(b for b in self.bones if b.parent == bone.index)

  def find(self, key):
    """Bone by id, then by sid (skin joint names use sids)."""
    bone = self.bones_by_id.get(key)
    if bone is not None:
      return bone
    for b in self.bones:
      if b.sid == key:
        return b
    return None

  @staticmethod
  def parse(root_joints, asset, parse_child=None):
    """
    root_joints: the JOINT <node> elements directly under the skeleton node.
    parse_child(element, bone) handles non-joint nodes nested in a bone.
    """
    bones = []
    bones_by_id = {}
    for joint_el in root_joints:
      _parse_bone(joint_el, asset, None, bones, bones_by_id, parse_child)
    return Skeleton(bones=tuple(bones), bones_by_id=bones_by_id)

def _parse_bone(bone_el, asset, parent, bones, bones_by_id, parse_child):
  id = U.get_attribute(bone_el, 'id')
  if id in bones_by_id:
    raise DuplicateId('bone', id)

  index = len(bones)
  if parent is not None and parent >= index:
    raise StructuralInvariantViolation(f'Bone "{id}" parent index {parent} is not less than {index}')

  bone = Bone(
    id=id,
    sid=bone_el.get('sid'),
    name=bone_el.get('name') or id,
    index=index,
    parent=parent,
    location=Location.parse(bone_el, asset),
  )
  bones.append(bone)
  bones_by_id[id] = bone

  for child_el in U.children(bone_el, 'node'):
    if is_joint(child_el):
      _parse_bone(child_el, asset, index, bones, bones_by_id, parse_child)
    elif parse_child is not None:
      parse_child(child_el, bone)
    else:
      raise StructuralInvariantViolation(f'Bone "{id}" has a non-joint child node')
