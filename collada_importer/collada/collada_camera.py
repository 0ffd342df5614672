# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from dataclasses import dataclass
from typing import Optional, Union

from ..core.errors import MissingElement, StructuralInvariantViolation
from ..core.registry import Registry
from . import collada_util as U

def _optional_float(el, name):
  if U.find_element(el, name) is None:
    return None
  return U.parse_text_as_float(el, name)

@dataclass(frozen=True)
class Perspective:
  z_near: float
  z_far: float
  x_fov: Optional[float] = None
  y_fov: Optional[float] = None
  aspect_ratio: Optional[float] = None

@dataclass(frozen=True)
class Orthographic:
  z_near: float
  z_far: float
  x_mag: Optional[float] = None
  y_mag: Optional[float] = None
  aspect_ratio: Optional[float] = None

def _parse_projection(technique, camera_id):
  perspective = U.find_element(technique, 'perspective')
  orthographic = U.find_element(technique, 'orthographic')
  if perspective is not None and orthographic is not None:
    raise StructuralInvariantViolation(f'Camera "{camera_id}" is both perspective and orthographic')

  if perspective is not None:
    proj = Perspective(
      z_near=U.parse_text_as_float(perspective, 'znear'),
      z_far=U.parse_text_as_float(perspective, 'zfar'),
      x_fov=_optional_float(perspective, 'xfov'),
      y_fov=_optional_float(perspective, 'yfov'),
      aspect_ratio=_optional_float(perspective, 'aspect_ratio'),
    )
    if proj.x_fov is None and proj.y_fov is None:
      raise MissingElement('perspective', 'xfov')
    return proj

  if orthographic is not None:
    proj = Orthographic(
      z_near=U.parse_text_as_float(orthographic, 'znear'),
      z_far=U.parse_text_as_float(orthographic, 'zfar'),
      x_mag=_optional_float(orthographic, 'xmag'),
      y_mag=_optional_float(orthographic, 'ymag'),
      aspect_ratio=_optional_float(orthographic, 'aspect_ratio'),
    )
    if proj.x_mag is None and proj.y_mag is None:
      raise MissingElement('orthographic', 'xmag')
    return proj

  raise MissingElement('technique_common', 'perspective')

@dataclass(frozen=True, eq=False)
class Camera:
  id: str
  name: str
  projection: Union[Perspective, Orthographic]

  @staticmethod
  def parse(camera_el):
    id = U.get_attribute(camera_el, 'id')
    name = camera_el.get('name') or id
    technique = U.get_element(U.get_element(camera_el, 'optics'), 'technique_common')
    return Camera(id=id, name=name, projection=_parse_projection(technique, id))

def parse_cameras(root):
  cameras = Registry('camera')
  library = U.find_element(root, 'library_cameras')
  if library is not None:
    for camera_el in U.children(library, 'camera'):
      camera = Camera.parse(camera_el)
      cameras.insert(camera.id, camera)
  return cameras.freeze()
