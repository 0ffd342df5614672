# ##### BEGIN LICENSE BLOCK #####
#
# This program is licensed under The MIT License:
# see LICENSE for the full license text
#
# ##### END LICENSE BLOCK #####

import numpy as np

from ..core.errors import (
  MissingAttribute, MissingElement, MissingText,
  ParseFloatError, ParseIntError, ParseUnsignedError
)

def tag_name(el):
  if el is None or el.tag is None:
    return ""
  return el.tag.split('}', 1)[-1]

def children(el, name):
  return el.findall('{*}' + name)

def get_attribute(el, name):
  value = el.get(name)
  if value is None:
    raise MissingAttribute(tag_name(el), name)
  return value

def find_element(el, name):
  """Zero or one child called name; more than one is ambiguous."""
  found = children(el, name)
  if len(found) > 1:
    raise MissingElement(tag_name(el), name, ambiguous=True)
  return found[0] if found else None

def get_element(el, name):
  found = find_element(el, name)
  if found is None:
    raise MissingElement(tag_name(el), name)
  return found

def get_text(el):
  if el.text is None:
    raise MissingText(tag_name(el))
  return el.text

def split_tokens(text):
  return text.split()

def parse_float(token, field):
  try:
    return float(token)
  except ValueError:
    raise ParseFloatError(field, token) from None

def parse_usize(token, field):
  try:
    value = int(token)
  except ValueError:
    raise ParseUnsignedError(field, token) from None
  if value < 0:
    raise ParseUnsignedError(field, token)
  return value

def parse_attribute_as_usize(el, name):
  return parse_usize(get_attribute(el, name), f"{tag_name(el)}@{name}")

def parse_attribute_as_float(el, name):
  return parse_float(get_attribute(el, name), f"{tag_name(el)}@{name}")

def parse_text_as_float(el, name):
  return parse_float(get_text(get_element(el, name)).strip(), name)

def _first_bad_token(tokens, convert):
  for tok in tokens:
    try:
      convert(tok)
    except ValueError:
      return tok
  return tokens[0] if tokens else ''

def parse_floats_np(tokens, field, dtype=np.float32):
  try:
    return np.asarray(tokens, dtype=dtype).reshape(-1)
  except ValueError:
    raise ParseFloatError(field, _first_bad_token(tokens, float)) from None

def parse_ints_np(tokens, field, dtype=np.int64):
  try:
    return np.asarray([int(t) for t in tokens], dtype=dtype)
  except ValueError:
    raise ParseIntError(field, _first_bad_token(tokens, int)) from None

def parse_usizes_np(tokens, field):
  arr = parse_ints_np(tokens, field)
  if arr.size and arr.min() < 0:
    raise ParseUnsignedError(field, tokens[int(np.argmin(arr))])
  return arr

def freeze_array(arr):
  arr.flags.writeable = False
  return arr
