# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

import numpy as np
import pytest

from collada_importer import (
  Axis, CardinalityMismatch, DuplicateId, Editor, MissingAttribute, MissingElement, ParseFloatError,
  Source, StructuralInvariantViolation, UnexpectedEndOfData, UnresolvedReference,
)
from collada_importer.collada.collada_reader import read_sources

from conftest import source_xml

XYZ = [('X', 'float'), ('Y', 'float'), ('Z', 'float')]
TWELVE = '1 2 3 4 5 6 7 8 9 10 11 12'

def test_xyz_layers_y_up(element, y_up):
  source = Source.parse(element(source_xml('pos', TWELVE, XYZ, 4, 3)), y_up)

  assert source.count == 4
  assert list(source.layers) == ['X', 'Y', 'Z']
  assert source.layer('X').data.tolist() == [1, 4, 7, 10]
  assert source.layer('Y').data.tolist() == [2, 5, 8, 11]
  assert source.layer('Z').data.tolist() == [3, 6, 9, 12]
  assert source.format == 'X:float Y:float Z:float'

def test_layers_are_read_only(element, y_up):
  source = Source.parse(element(source_xml('pos', TWELVE, XYZ, 4, 3)), y_up)
  with pytest.raises(ValueError):
    source.layer('X').data[0] = 0

def test_z_up_swaps_y_and_z(element, make_asset):
  source = Source.parse(element(source_xml('pos', TWELVE, XYZ, 4, 3)), make_asset(Axis.Z))

  assert source.layer('Z').data.tolist() == [2, 5, 8, 11]
  assert source.layer('Y').data.tolist() == [3, 6, 9, 12]
  assert source.format == 'X:float Z:float Y:float'

def test_x_up_swaps_x_and_y(element, make_asset):
  source = Source.parse(element(source_xml('pos', TWELVE, XYZ, 4, 3)), make_asset(Axis.X))

  assert source.layer('Y').data.tolist() == [1, 4, 7, 10]
  assert source.layer('X').data.tolist() == [2, 5, 8, 11]

def test_blender_negates_x(element, make_asset):
  source = Source.parse(element(source_xml('pos', TWELVE, XYZ, 4, 3)), make_asset(editor=Editor.BLENDER))

  assert source.layer('X').data.tolist() == [-1, -4, -7, -10]
  assert source.layer('Y').data.tolist() == [2, 5, 8, 11]

def test_texcoord_names(element, y_up):
  source = Source.parse(element(source_xml('uv', '0 0.5 1 0.25', [('S', 'float'), ('T', 'float')], 2, 2)), y_up)

  assert list(source.layers) == ['U', 'V']
  assert source.layer('V').data.tolist() == [0.5, 0.25]

def test_stride_is_required(element, y_up):
  with pytest.raises(MissingAttribute) as e:
    Source.parse(element(source_xml('pos', '1 2 3 4 5 6', XYZ, 2)), y_up)
  assert (e.value.element_name, e.value.attrib_name) == ('accessor', 'stride')

def test_layers_compare_by_identity(element, y_up):
  xml = source_xml('pos', TWELVE, XYZ, 4, 3)
  a = Source.parse(element(xml), y_up).layer('X')
  b = Source.parse(element(xml), y_up).layer('X')

  assert a == a
  assert a != b
  assert len({a, b}) == 2
  assert np.array_equal(a.data, b.data)

def test_stride_mismatch(element, y_up):
  with pytest.raises(CardinalityMismatch):
    Source.parse(element(source_xml('pos', TWELVE, XYZ, 3, 4)), y_up)

def test_count_mismatch(element, y_up):
  with pytest.raises(CardinalityMismatch):
    Source.parse(element(source_xml('pos', TWELVE, XYZ, 3, 3)), y_up)

def test_short_array(element, y_up):
  xml = source_xml('pos', '1 2 3 4 5 6 7 8 9 10 11', XYZ, 4, 3, array_count=12)
  with pytest.raises(UnexpectedEndOfData):
    Source.parse(element(xml), y_up)

def test_long_array(element, y_up):
  xml = source_xml('pos', TWELVE + ' 13', XYZ, 4, 3, array_count=12)
  with pytest.raises(CardinalityMismatch) as e:
    Source.parse(element(xml), y_up)
  assert not isinstance(e.value, UnexpectedEndOfData)

def test_empty_params(element, y_up):
  with pytest.raises(StructuralInvariantViolation):
    Source.parse(element(source_xml('pos', TWELVE, [], 4, 3)), y_up)

def test_bad_float_token(element, y_up):
  with pytest.raises(ParseFloatError) as e:
    Source.parse(element(source_xml('pos', '1 2 x', XYZ, 1, 3)), y_up)
  assert e.value.token == 'x'

def test_names_and_matrices(element, y_up):
  names = Source.parse(element(source_xml('j', 'root arm', [('JOINT', 'name')], 2, 1, array='Name_array')), y_up)
  assert names.layer('JOINT').data == ('root', 'arm')
  assert names.format == 'JOINT:name'

  values = ' '.join(str(v) for v in range(32))
  matrices = Source.parse(element(source_xml('m', values, [('TRANSFORM', 'float4x4')], 2, 16)), y_up)
  data = matrices.layer('TRANSFORM').data
  assert data.shape == (2, 4, 4)
  assert data[1, 0, 0] == 16
  assert np.array_equal(data[0, 3], [12, 13, 14, 15])

def test_param_type_must_fit_array(element, y_up):
  with pytest.raises(StructuralInvariantViolation):
    Source.parse(element(source_xml('j', '1 2', [('JOINT', 'name')], 2, 1)), y_up)

def test_missing_accessor(element, y_up):
  xml = '<source id="s"><float_array id="a" count="1">1</float_array><technique_common/></source>'
  with pytest.raises(MissingElement):
    Source.parse(element(xml), y_up)

def mesh_with(vertices):
  return '<mesh>' + source_xml('pos', TWELVE, XYZ, 4, 3) + vertices + '</mesh>'

def test_vertices_synonym(element, y_up):
  sources = read_sources(element(mesh_with('<vertices id="verts"><input semantic="POSITION" source="#pos"/></vertices>')), y_up)

  assert sources.frozen
  assert sources.resolve('#verts') is sources['pos']

def test_synonym_unknown_source(element, y_up):
  with pytest.raises(UnresolvedReference) as e:
    read_sources(element(mesh_with('<vertices id="verts"><input semantic="POSITION" source="#nope"/></vertices>')), y_up)
  assert e.value.id == 'nope'

def test_synonym_duplicate_id(element, y_up):
  with pytest.raises(DuplicateId):
    read_sources(element(mesh_with('<vertices id="pos"><input semantic="POSITION" source="#pos"/></vertices>')), y_up)

def test_synonym_needs_single_input(element, y_up):
  xml = mesh_with(
    '<vertices id="verts"><input semantic="POSITION" source="#pos"/><input semantic="NORMAL" source="#pos"/></vertices>'
  )
  with pytest.raises(MissingElement) as e:
    read_sources(element(xml), y_up)
  assert e.value.ambiguous
