# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####


# Init collada_importer
__version__ = "0.1.0"

from .core.errors import (
  ColladaError,
  MissingAttribute,
  MissingElement,
  MissingText,
  NumericParseError,
  ParseFloatError,
  ParseIntError,
  ParseUnsignedError,
  DuplicateId,
  UnresolvedReference,
  CardinalityMismatch,
  UnexpectedEndOfData,
  StructuralInvariantViolation,
  FileAccess,
  NonRepresentableFileName,
  MalformedDocument,
)
from .core.registry import Registry
from .core.types import ImportConfig
from .collada.collada_asset import Asset, Axis, Editor, Unit
from .collada.collada_location import Location, Matrix, Position, Quaternion, Scale
from .collada.collada_reader import Source, SourceLayer
from .collada.collada_geometry import Geometry, Mesh, Polygon
from .collada.collada_camera import Camera, Orthographic, Perspective
from .collada.collada_skin import BonesPerVertex, Skin
from .collada.collada_animation import Animation
from .collada.collada_skeleton import Bone, Skeleton
from .collada.collada_node import Controller, ControllerKind, Node
from .collada.collada_scene import Scene
from .collada.collada_document import Document, load_document, parse_document_string
from .collada.collada_tree import format_tree, print_tree
