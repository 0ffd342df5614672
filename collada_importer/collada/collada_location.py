# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from dataclasses import dataclass
from math import cos, pi, sin, sqrt
from typing import NamedTuple

import numpy as np

from ..core.errors import CardinalityMismatch, StructuralInvariantViolation, UnexpectedEndOfData
from .collada_asset import Axis
from . import collada_util as U

# canonical axis i is read from document axis AXIS_ORDER[up][i]
AXIS_ORDER = {
  Axis.X: (1, 0, 2),
  Axis.Y: (0, 1, 2),
  Axis.Z: (0, 2, 1),
}
AXIS_NAMES = ('X', 'Y', 'Z')

def permute_axes(values, up_axis):
  order = AXIS_ORDER[up_axis]
  return tuple(values[i] for i in order)

def remap_axis_name(name, up_axis):
  if name not in AXIS_NAMES:
    return name
  order = AXIS_ORDER[up_axis]
  return AXIS_NAMES[order.index(AXIS_NAMES.index(name))]

def parse_vector(text, size, field):
  tokens = U.split_tokens(text)
  if len(tokens) < size:
    raise UnexpectedEndOfData(f"Only {len(tokens)} elements of {field} have been read, expected {size}")
  if len(tokens) > size:
    raise CardinalityMismatch(f"{field} has {len(tokens)} elements, expected {size}")
  return tuple(U.parse_float(t, field) for t in tokens)

class Position(NamedTuple):
  x: float
  y: float
  z: float

class Scale(NamedTuple):
  x: float = 1.0
  y: float = 1.0
  z: float = 1.0

class Quaternion(NamedTuple):
  x: float = 0.0
  y: float = 0.0
  z: float = 0.0
  w: float = 1.0

  @staticmethod
  def from_axis_angle(axis, degrees):
    ax, ay, az = axis
    length = sqrt(ax * ax + ay * ay + az * az)
    if length == 0.0:
      if degrees == 0.0:
        return Quaternion()
      raise StructuralInvariantViolation("Rotation axis has zero length")
    half = degrees * pi / 360.0
    s = sin(half) / length
    return Quaternion(ax * s, ay * s, az * s, cos(half))

  @staticmethod
  def from_matrix(m):
    """Rotation part of a column-vector matrix (upper 3x3, scale already removed)."""
    m00, m01, m02 = float(m[0][0]), float(m[0][1]), float(m[0][2])
    m10, m11, m12 = float(m[1][0]), float(m[1][1]), float(m[1][2])
    m20, m21, m22 = float(m[2][0]), float(m[2][1]), float(m[2][2])
    trace = m00 + m11 + m22

    if trace > 0.0:
      s = sqrt(trace + 1.0) * 2.0
      q = Quaternion((m21 - m12) / s, (m02 - m20) / s, (m10 - m01) / s, 0.25 * s)
    elif m00 > m11 and m00 > m22:
      s = sqrt(1.0 + m00 - m11 - m22) * 2.0
      q = Quaternion(0.25 * s, (m01 + m10) / s, (m02 + m20) / s, (m21 - m12) / s)
    elif m11 > m22:
      s = sqrt(1.0 + m11 - m00 - m22) * 2.0
      q = Quaternion((m01 + m10) / s, 0.25 * s, (m12 + m21) / s, (m02 - m20) / s)
    else:
      s = sqrt(1.0 + m22 - m00 - m11) * 2.0
      q = Quaternion((m02 + m20) / s, (m12 + m21) / s, 0.25 * s, (m10 - m01) / s)

    return q.normalized()

  def magnitude(self):
    return sqrt(self.x * self.x + self.y * self.y + self.z * self.z + self.w * self.w)

  def normalized(self):
    mag = self.magnitude()
    if mag == 0.0:
      raise StructuralInvariantViolation("Quaternion has zero magnitude")
    return Quaternion(self.x / mag, self.y / mag, self.z / mag, self.w / mag)

  def __matmul__(self, other):
    x1, y1, z1, w1 = self
    x2, y2, z2, w2 = other
    return Quaternion(
      w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
      w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
      w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
      w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
    )

  def to_matrix(self):
    x, y, z, w = self
    return np.array((
      (1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - z * w), 2.0 * (x * z + y * w)),
      (2.0 * (x * y + z * w), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - x * w)),
      (2.0 * (x * z - y * w), 2.0 * (y * z + x * w), 1.0 - 2.0 * (x * x + y * y)),
    ), dtype=np.float64)

class Matrix:
  """4x4 COLLADA matrix: row-major text, column vectors, translation in the last column."""
  def __init__(self, values):
    self.values = U.freeze_array(np.array(values, dtype=np.float64).reshape(4, 4))

  @staticmethod
  def parse(text, field='matrix'):
    return Matrix(parse_vector(text, 16, field))

  @staticmethod
  def identity():
    return Matrix(np.identity(4))

  def __eq__(self, other):
    return isinstance(other, Matrix) and np.array_equal(self.values, other.values)

  def __hash__(self):
    return hash(self.values.tobytes())

  def __repr__(self):
    return f"Matrix({self.values.tolist()})"

  def translation(self):
    return (float(self.values[0, 3]), float(self.values[1, 3]), float(self.values[2, 3]))

  def decompose(self):
    """Document-space (position, quaternion, scale) before any axis handling."""
    basis = self.values[:3, :3]
    mags = np.linalg.norm(basis, axis=0)
    safe = np.where(mags > 1e-12, mags, 1.0)
    rotation = Quaternion.from_matrix(basis / safe)
    scale = tuple(round(float(v), 2) for v in mags)
    return self.translation(), rotation, scale

  def to_location(self, asset):
    position, rotation, scale = self.decompose()
    return Location.normalize(position, rotation, scale, asset)

@dataclass(frozen=True)
class Location:
  position: Position = Position(0.0, 0.0, 0.0)
  rotation: Quaternion = Quaternion()
  scale: Scale = Scale()

  @staticmethod
  def normalize(position, rotation, scale, asset):
    """Document axes -> canonical axes, then the authoring tool handedness fix."""
    up = asset.up_axis
    px, py, pz = permute_axes(position, up)
    qx, qy, qz = permute_axes((rotation.x, rotation.y, rotation.z), up)
    sx, sy, sz = permute_axes(scale, up)

    if asset.left_handed:
      px = -px
      qx = -qx

    return Location(
      Position(px, py, pz),
      Quaternion(qx, qy, qz, rotation.w),
      Scale(sx, sy, sz),
    )

  @staticmethod
  def parse(node, asset, ignore_scale=False):
    matrix_el = U.find_element(node, 'matrix')
    trs = [c for c in node if U.tag_name(c) in ('translate', 'rotate', 'scale')]

    if matrix_el is not None:
      if trs:
        raise StructuralInvariantViolation(
          f'Node "{node.get("id") or node.get("name") or ""}" mixes <matrix> with translate/rotate/scale'
        )
      location = Matrix.parse(U.get_text(matrix_el)).to_location(asset)
    else:
      position = (0.0, 0.0, 0.0)
      translate_el = U.find_element(node, 'translate')
      if translate_el is not None:
        position = parse_vector(U.get_text(translate_el), 3, 'translate')

      rotation = Quaternion()
      for rotate_el in U.children(node, 'rotate'):
        ax, ay, az, angle = parse_vector(U.get_text(rotate_el), 4, 'rotate')
        rotation = (rotation @ Quaternion.from_axis_angle((ax, ay, az), angle)).normalized()

      scale = (1.0, 1.0, 1.0)
      scale_el = U.find_element(node, 'scale')
      if scale_el is not None:
        scale = parse_vector(U.get_text(scale_el), 3, 'scale')

      location = Location.normalize(position, rotation, scale, asset)

    if ignore_scale:
      location = Location(location.position, location.rotation, Scale())
    return location
