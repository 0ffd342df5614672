# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

@dataclass(frozen=True)
class ImportConfig:
  path: Optional[Path] = None
  detect_authoring_tool: bool = True
  ignore_node_scale: bool = False
  verbose: bool = True

@dataclass(frozen=True)
class SceneContext:
  config: ImportConfig
  asset: Any
  geometries: Any
  cameras: Any
  skins: Any
