"""Editor-state queries evaluated inside the target document.

Each constant is a JavaScript function expression. ``call_expression`` turns
one into a self-invoking expression with JSON-encoded arguments, which is what
``EditorSession.execute`` sends over ``Runtime.evaluate``.

Live editor objects reference their workspace and their neighbours, so none of
these scripts returns one: they project ids, types and coordinates into plain
objects. Lookups that fail return ``{error: "..."}`` instead of throwing so the
caller can tell a missing block apart from a broken page.
"""
from __future__ import annotations
import json
from typing import Any, Optional


def call_expression(script: str, *args: Any) -> str:
    """Build ``(script)(arg1, arg2, ...)`` with JSON-encoded arguments."""
    encoded = ", ".join(json.dumps(arg) for arg in args)
    return f"({script.strip()})({encoded})"


def script_error(result: Any) -> Optional[str]:
    """The ``error`` a lookup script reported, or None when it succeeded."""
    if result is None:
        return "editor query returned nothing"
    if isinstance(result, dict) and result.get("error"):
        return str(result["error"])
    return None


SELECTED_ID = """
function () {
  var selected = Blockly.common.getSelected();
  return selected ? selected.id : null;
}
"""

FLYOUT_BLOCK_ID_BY_TYPE = """
function (blockType) {
  var flyout = Blockly.getMainWorkspace().getFlyout();
  if (!flyout) {
    return {error: 'main workspace has no flyout'};
  }
  var blocks = flyout.getWorkspace().getBlocksByType(blockType);
  if (!blocks.length) {
    return {error: 'no block of type ' + blockType + ' in the flyout'};
  }
  return {id: blocks[0].id};
}
"""

SURFACE_BLOCK_ID_BY_TYPE = """
function (blockType, ordinal) {
  var blocks = Blockly.getMainWorkspace().getBlocksByType(blockType, true);
  if (ordinal < 0 || ordinal >= blocks.length) {
    return {error: 'found ' + blocks.length + ' blocks of type ' + blockType +
        ', wanted #' + ordinal};
  }
  return {id: blocks[ordinal].id};
}
"""

ALL_BLOCKS = """
function () {
  return Blockly.getMainWorkspace().getAllBlocks(false).map(function (block) {
    return {type: block.type, id: block.id};
  });
}
"""

# Shared by the connection scripts below: finds the block (optionally inside a
# mutator workspace) and the connection described by {kind, name}.
_RESOLVE_CONNECTION = """
  var main = Blockly.getMainWorkspace();
  var workspace = main;
  if (mutatorBlockId) {
    var owner = main.getBlockById(mutatorBlockId);
    if (!owner) {
      return {error: 'no block with id ' + mutatorBlockId + ' on the main workspace'};
    }
    if (!owner.mutator || !owner.mutator.getWorkspace()) {
      return {error: 'block ' + mutatorBlockId + ' has no open mutator'};
    }
    workspace = owner.mutator.getWorkspace();
  }
  var block = workspace.getBlockById(id);
  if (!block) {
    return {error: 'no block with id ' + id};
  }
  var connection;
  switch (spec.kind) {
    case 'output':
      connection = block.outputConnection;
      break;
    case 'previous':
      connection = block.previousConnection;
      break;
    case 'next':
      connection = block.nextConnection;
      break;
    case 'input':
      var input = block.getInput(spec.name);
      if (!input) {
        return {error: 'block ' + id + ' has no input named ' + spec.name};
      }
      connection = input.connection;
      break;
    default:
      return {error: 'unknown connection kind ' + spec.kind};
  }
  if (!connection) {
    return {error: 'block ' + id + ' has no ' + spec.kind + ' connection' +
        (spec.name ? ' on ' + spec.name : '')};
  }
"""

CONNECTION_LOCATION = (
    """
function (id, spec, mutatorBlockId) {
"""
    + _RESOLVE_CONNECTION
    + """
  var loc = Blockly.utils.Coordinate.sum(
      block.getRelativeToSurfaceXY(), connection.getOffsetInBlock());
  var screen = Blockly.utils.svgMath.wsToScreenCoordinates(main, loc);
  return {x: screen.x, y: screen.y};
}
"""
)

CONNECTION_TARGET = (
    """
function (id, spec, mutatorBlockId) {
"""
    + _RESOLVE_CONNECTION
    + """
  var target = connection.targetConnection;
  if (!target) {
    return {connected: false};
  }
  var other = target.getSourceBlock();
  var result = {connected: true, blockId: other.id, kind: null, name: null};
  if (target === other.outputConnection) {
    result.kind = 'output';
  } else if (target === other.previousConnection) {
    result.kind = 'previous';
  } else if (target === other.nextConnection) {
    result.kind = 'next';
  } else {
    for (var i = 0; i < other.inputList.length; i++) {
      if (other.inputList[i].connection === target) {
        result.kind = 'input';
        result.name = other.inputList[i].name;
        break;
      }
    }
  }
  return result;
}
"""
)
