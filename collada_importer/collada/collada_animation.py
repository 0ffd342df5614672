# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

from dataclasses import dataclass
from typing import Dict

from ..core.errors import StructuralInvariantViolation, UnresolvedReference
from ..core.registry import Registry, strip_url
from . import collada_util as U
from .collada_reader import Source, read_sources, select_named_sources

def split_channel(target, source):
  """bone id is the target path head, skeleton id the source prefix before '_<bone id>'."""
  bone_id = target.split('/', 1)[0]
  pos = source.find(f"_{bone_id}")
  skeleton_id = source[:pos] if pos >= 0 else source
  return bone_id, skeleton_id

@dataclass(frozen=True, eq=False)
class Animation:
  id: str
  target: str
  bone_id: str
  skeleton_id: str
  sources: Dict[str, Source]
  samples_count: int

  def __repr__(self):
    return f"<Animation {self.id} bone={self.bone_id} skeleton={self.skeleton_id}>"

  @staticmethod
  def parse(animation_el, asset):
    id = U.get_attribute(animation_el, 'id')
    all_sources = read_sources(animation_el, asset)

    sampler_el = U.get_element(animation_el, 'sampler')
    sources = select_named_sources(sampler_el, all_sources, 'sampler')

    counts = {source.count for source in sources.values()}
    if len(counts) > 1:
      detail = ', '.join(f"{k}={s.count}" for k, s in sources.items())
      raise StructuralInvariantViolation(f'Animation "{id}": sources have different sample counts ({detail})')

    channel_el = U.get_element(animation_el, 'channel')
    channel_source = strip_url(U.get_attribute(channel_el, 'source'))
    sampler_id = sampler_el.get('id')
    if sampler_id is not None and sampler_id != channel_source:
      raise UnresolvedReference('sampler', channel_source)
    target = U.get_attribute(channel_el, 'target')

    bone_id, skeleton_id = split_channel(target, channel_source)

    return Animation(
      id=id,
      target=target,
      bone_id=bone_id,
      skeleton_id=skeleton_id,
      sources=sources,
      samples_count=counts.pop() if counts else 0,
    )

def _collect(animation_el, asset, animations):
  if U.find_element(animation_el, 'channel') is not None:
    animation = Animation.parse(animation_el, asset)
    animations.insert(animation.id, animation)
  # exporters may group channels in nested containers
  for child_el in U.children(animation_el, 'animation'):
    _collect(child_el, asset, animations)

def parse_animations(root, asset):
  animations = Registry('animation')
  library = U.find_element(root, 'library_animations')
  if library is not None:
    for animation_el in U.children(library, 'animation'):
      _collect(animation_el, asset, animations)
  return animations.freeze()
