# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

import os
import time
import xml.etree.ElementTree as ET
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from ..core.errors import FileAccess, MalformedDocument, NonRepresentableFileName, StructuralInvariantViolation
from ..core.registry import Registry
from ..core.types import ImportConfig, SceneContext
from . import collada_util as U
from .collada_animation import parse_animations
from .collada_asset import Asset
from .collada_camera import parse_cameras
from .collada_geometry import parse_geometries
from .collada_scene import Scene, parse_scenes, resolve_active_scene
from .collada_skin import parse_controllers

@dataclass(frozen=True, eq=False)
class Document:
  asset: Asset
  geometries: Registry
  cameras: Registry
  controllers: Registry
  animations: Registry
  scenes: Registry
  scene: Optional[Scene] = None
  config: ImportConfig = ImportConfig()

  def __repr__(self):
    return (f"<Document geometries={len(self.geometries)} cameras={len(self.cameras)} "
            f"controllers={len(self.controllers)} animations={len(self.animations)} scenes={len(self.scenes)}>")

  @staticmethod
  def parse(root, config=None):
    config = config or ImportConfig()
    if U.tag_name(root) != 'COLLADA':
      raise StructuralInvariantViolation(f"Expected <COLLADA> root element, found <{U.tag_name(root)}>")

    asset = Asset.parse(root, detect_authoring_tool=config.detect_authoring_tool)

    # phase 1: libraries, each frozen once parsed
    cameras = parse_cameras(root)
    geometries = parse_geometries(root, asset)
    controllers = parse_controllers(root, asset)
    animations = parse_animations(root, asset)

    # phase 2: scene graph against the frozen registries
    ctx = SceneContext(
      config=config,
      asset=asset,
      geometries=geometries,
      cameras=cameras,
      skins=controllers,
    )
    scenes = parse_scenes(root, ctx)

    return Document(
      asset=asset,
      geometries=geometries,
      cameras=cameras,
      controllers=controllers,
      animations=animations,
      scenes=scenes,
      scene=resolve_active_scene(root, scenes),
      config=config,
    )

def parse_document_string(text, config=None):
  try:
    root = ET.fromstring(text)
  except ET.ParseError as e:
    raise MalformedDocument('<string>', e) from None
  return Document.parse(root, config)

def _file_name(filepath):
  name = os.fsdecode(filepath)
  try:
    name.encode('utf-8')
  except UnicodeEncodeError:
    raise NonRepresentableFileName(name) from None
  return name

def load_document(filepath, config=None):
  name = _file_name(filepath)
  config = replace(config or ImportConfig(), path=Path(name))

  if config.verbose:
    print("importing DAE: %r..." % (name))
  t0 = time.perf_counter()

  try:
    with open(name, 'rb') as f:
      tree = ET.parse(f)
  except OSError as e:
    raise FileAccess(name, e) from None
  except ET.ParseError as e:
    raise MalformedDocument(name, e) from None

  document = Document.parse(tree.getroot(), config)
  if config.verbose:
    print(" done in %.4f sec." % (time.perf_counter() - t0))
  return document
