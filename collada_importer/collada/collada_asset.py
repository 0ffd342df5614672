# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from dataclasses import dataclass
from enum import Enum

from ..core.errors import StructuralInvariantViolation
from . import collada_util as U

class Axis(Enum):
  X = 'X_UP'
  Y = 'Y_UP'
  Z = 'Z_UP'

class Editor(Enum):
  BLENDER = 'blender'
  UNKNOWN = 'unknown'

@dataclass(frozen=True)
class Unit:
  name: str
  ratio: float

@dataclass(frozen=True)
class Asset:
  created: str
  modified: str
  unit: Unit
  up_axis: Axis
  editor: Editor
  authoring_tool: str = ''

  @property
  def left_handed(self):
    return self.editor == Editor.BLENDER

  @staticmethod
  def parse(root, detect_authoring_tool=True):
    asset = U.get_element(root, 'asset')

    created = U.get_text(U.get_element(asset, 'created')).strip()
    modified = U.get_text(U.get_element(asset, 'modified')).strip()

    unit_el = U.get_element(asset, 'unit')
    unit = Unit(
      name=unit_el.get('name') or 'meter',
      ratio=U.parse_attribute_as_float(unit_el, 'meter'),
    )

    up_axis_str = U.get_text(U.get_element(asset, 'up_axis')).strip()
    try:
      up_axis = Axis(up_axis_str)
    except ValueError:
      raise StructuralInvariantViolation(
        f"Expected X_UP, Y_UP or Z_UP, but {up_axis_str} has been found"
      ) from None

    # contributor is optional; without it the authoring tool is unknown
    tool = ''
    contributor = U.find_element(asset, 'contributor')
    if contributor is not None:
      tool_el = U.find_element(contributor, 'authoring_tool')
      if tool_el is not None:
        tool = (tool_el.text or '').strip()

    editor = Editor.UNKNOWN
    if detect_authoring_tool and tool.startswith('Blender'):
      editor = Editor.BLENDER

    return Asset(
      created=created,
      modified=modified,
      unit=unit,
      up_axis=up_axis,
      editor=editor,
      authoring_tool=tool,
    )
