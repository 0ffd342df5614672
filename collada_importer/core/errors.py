# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

class ColladaError(Exception):
  """Base class of every import failure. The first one raised aborts the import."""
  def __init__(self, msg):
    super().__init__(msg)
    self.msg = msg

  def __str__(self):
    return self.msg

  def __repr__(self):
    return f'{type(self).__name__}("{self.msg}")'

class MissingAttribute(ColladaError):
  def __init__(self, element_name, attrib_name):
    super().__init__(f'Element "{element_name}" has no attribute "{attrib_name}"')
    self.element_name = element_name
    self.attrib_name = attrib_name

class MissingElement(ColladaError):
  def __init__(self, element_name, child_element_name, ambiguous=False):
    if ambiguous:
      msg = f'Element "{element_name}" contains more than one element "{child_element_name}"'
    else:
      msg = f'Element "{element_name}" does not contain element "{child_element_name}"'
    super().__init__(msg)
    self.element_name = element_name
    self.child_element_name = child_element_name
    self.ambiguous = ambiguous

class MissingText(ColladaError):
  def __init__(self, element_name):
    super().__init__(f'Element "{element_name}" does not contain text')
    self.element_name = element_name

class NumericParseError(ColladaError):
  kind = "number"

  def __init__(self, field, token):
    super().__init__(f'Can not parse {field} "{token}" as {self.kind}')
    self.field = field
    self.token = token

class ParseFloatError(NumericParseError):
  kind = "float"

class ParseIntError(NumericParseError):
  kind = "int"

class ParseUnsignedError(ParseIntError):
  kind = "unsigned"

class DuplicateId(ColladaError):
  def __init__(self, scope, id):
    super().__init__(f'Duplicate {scope} with id "{id}"')
    self.scope = scope
    self.id = id

class UnresolvedReference(ColladaError):
  def __init__(self, scope, id):
    super().__init__(f'{scope.capitalize()} with id "{id}" does not exist')
    self.scope = scope
    self.id = id

class CardinalityMismatch(ColladaError):
  """Stride, count or length of declared data disagree."""

class UnexpectedEndOfData(CardinalityMismatch):
  """A flattened array holds fewer tokens than its declaration requires."""

class StructuralInvariantViolation(ColladaError):
  pass

class FileAccess(ColladaError):
  def __init__(self, file_name, error):
    super().__init__(f'File "{file_name}" error: {error}')
    self.file_name = file_name
    self.error = error

class NonRepresentableFileName(ColladaError):
  def __init__(self, file_name):
    super().__init__(f'Name of file {file_name!r} is not representable as unicode')
    self.file_name = file_name

class MalformedDocument(ColladaError):
  def __init__(self, file_name, error):
    super().__init__(f'Parse error in "{file_name}": {error}')
    self.file_name = file_name
    self.error = error
