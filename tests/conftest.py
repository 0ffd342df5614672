# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

import xml.etree.ElementTree as ET

import pytest

from collada_importer import Asset, Axis, Editor, Unit

COLLADA_NS = "http://www.collada.org/2005/11/COLLADASchema"

IDENTITY = "1 0 0 0 0 1 0 0 0 0 1 0 0 0 0 1"

def source_xml(id, values, params, count, stride=None, array='float_array', array_count=None):
  """params: [(name, type)]"""
  tokens = values.split()
  stride_attr = '' if stride is None else f' stride="{stride}"'
  params_xml = ''.join(f'<param name="{n}" type="{t}"/>' for n, t in params)
  return (
    f'<source id="{id}">'
    f'<{array} id="{id}-array" count="{len(tokens) if array_count is None else array_count}">{values}</{array}>'
    f'<technique_common><accessor source="#{id}-array" count="{count}"{stride_attr}>'
    f'{params_xml}</accessor></technique_common></source>'
  )

def collada(body, up_axis='Y_UP', tool='Test Exporter'):
  return (
    f'<COLLADA xmlns="{COLLADA_NS}" version="1.4.1">'
    '<asset>'
    f'<contributor><author>tests</author><authoring_tool>{tool}</authoring_tool></contributor>'
    '<created>2024-01-01T00:00:00</created>'
    '<modified>2024-01-02T00:00:00</modified>'
    '<unit name="centimeter" meter="0.01"/>'
    f'<up_axis>{up_axis}</up_axis>'
    '</asset>'
    f'{body}'
    '</COLLADA>'
  )

QUAD_GEOMETRY = (
  '<geometry id="quad-mesh" name="quad"><mesh>'
  + source_xml('quad-positions', '0 0 0 1 0 0 1 1 0 0 1 0', [('X', 'float'), ('Y', 'float'), ('Z', 'float')], 4, 3)
  + source_xml('quad-uv', '0 0 1 0 1 1 0 1', [('S', 'float'), ('T', 'float')], 4, 2)
  + '<vertices id="quad-vertices"><input semantic="POSITION" source="#quad-positions"/></vertices>'
  '<polylist material="quad-material" count="2">'
  '<input semantic="VERTEX" source="#quad-vertices" offset="0"/>'
  '<input semantic="TEXCOORD" source="#quad-uv" offset="1" set="0"/>'
  '<vcount>3 3</vcount>'
  '<p>0 0 1 1 2 2 0 0 2 2 3 3</p>'
  '</polylist>'
  '</mesh></geometry>'
)

QUAD_SKIN = (
  '<controller id="quad-skin"><skin source="#quad-mesh">'
  f'<bind_shape_matrix>{IDENTITY}</bind_shape_matrix>'
  + source_xml('quad-skin-joints', 'root arm', [('JOINT', 'name')], 2, 1, array='Name_array')
  + source_xml('quad-skin-bind', f'{IDENTITY} {IDENTITY}', [('TRANSFORM', 'float4x4')], 2, 16)
  + source_xml('quad-skin-weights', '1 0.25 0.75', [('WEIGHT', 'float')], 3, 1)
  + '<joints>'
  '<input semantic="JOINT" source="#quad-skin-joints"/>'
  '<input semantic="INV_BIND_MATRIX" source="#quad-skin-bind"/>'
  '</joints>'
  '<vertex_weights count="4">'
  '<input semantic="JOINT" source="#quad-skin-joints" offset="0"/>'
  '<input semantic="WEIGHT" source="#quad-skin-weights" offset="1"/>'
  '<vcount>1 2 1 1</vcount>'
  '<v>0 0 0 1 1 2 1 0 0 0</v>'
  '</vertex_weights>'
  '</skin></controller>'
)

ARM_ANIMATION = (
  '<animation id="Armature_arm_pose_matrix">'
  + source_xml('Armature_arm_pose_matrix-input', '0 1', [('TIME', 'float')], 2, 1)
  + source_xml('Armature_arm_pose_matrix-output', f'{IDENTITY} {IDENTITY}', [('TRANSFORM', 'float4x4')], 2, 16)
  + source_xml('Armature_arm_pose_matrix-interpolation', 'LINEAR LINEAR', [('INTERPOLATION', 'name')], 2, 1,
               array='Name_array')
  + '<sampler id="Armature_arm_pose_matrix-sampler">'
  '<input semantic="INPUT" source="#Armature_arm_pose_matrix-input"/>'
  '<input semantic="OUTPUT" source="#Armature_arm_pose_matrix-output"/>'
  '<input semantic="INTERPOLATION" source="#Armature_arm_pose_matrix-interpolation"/>'
  '</sampler>'
  '<channel source="#Armature_arm_pose_matrix-sampler" target="arm/transform"/>'
  '</animation>'
)

PERSPECTIVE_CAMERA = (
  '<camera id="cam-data" name="cam"><optics><technique_common><perspective>'
  '<xfov>49.1</xfov><aspect_ratio>1.78</aspect_ratio><znear>0.1</znear><zfar>100</zfar>'
  '</perspective></technique_common></optics></camera>'
)

VISUAL_SCENE = (
  '<visual_scene id="Scene" name="Scene">'
  '<node id="Camera" name="Camera" type="NODE">'
  '<translate sid="location">0 1 5</translate>'
  '<instance_camera url="#cam-data"/>'
  '</node>'
  '<node id="Lamp" name="Lamp" type="NODE"><instance_light url="#lamp-data"/></node>'
  '<node id="Armature" name="Armature" type="NODE">'
  '<node id="Armature_root" name="root" sid="root" type="JOINT">'
  f'<matrix sid="transform">{IDENTITY}</matrix>'
  '<node id="Armature_arm" name="arm" sid="arm" type="JOINT">'
  '<matrix sid="transform">1 0 0 0 0 1 0 2 0 0 1 0 0 0 0 1</matrix>'
  '<node id="Prop" name="Prop" type="NODE"><instance_geometry url="#quad-mesh"/></node>'
  '</node>'
  '</node>'
  '</node>'
  '<node id="Skinned" name="Skinned" type="NODE">'
  '<instance_controller url="#quad-skin"><skeleton>#Armature_root</skeleton></instance_controller>'
  '</node>'
  '</visual_scene>'
)

def full_scene(up_axis='Y_UP', tool='Test Exporter'):
  return collada(
    f'<library_cameras>{PERSPECTIVE_CAMERA}</library_cameras>'
    f'<library_geometries>{QUAD_GEOMETRY}</library_geometries>'
    f'<library_controllers>{QUAD_SKIN}</library_controllers>'
    f'<library_animations><animation id="action">{ARM_ANIMATION}</animation></library_animations>'
    f'<library_visual_scenes>{VISUAL_SCENE}</library_visual_scenes>'
    '<scene><instance_visual_scene url="#Scene"/></scene>',
    up_axis=up_axis,
    tool=tool,
  )

@pytest.fixture
def make_asset():
  def make(up_axis=Axis.Y, editor=Editor.UNKNOWN):
    return Asset(
      created='2024-01-01T00:00:00',
      modified='2024-01-02T00:00:00',
      unit=Unit('meter', 1.0),
      up_axis=up_axis,
      editor=editor,
    )
  return make

@pytest.fixture
def y_up(make_asset):
  return make_asset()

@pytest.fixture
def element():
  return ET.fromstring

@pytest.fixture
def scene_text():
  return full_scene()

@pytest.fixture
def scene_file(tmp_path):
  path = tmp_path / "scene.dae"
  path.write_text(full_scene(), encoding='utf-8')
  return path
