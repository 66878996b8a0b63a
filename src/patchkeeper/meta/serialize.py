"""
Text encoding of the metadata body.

One directive per line, blank lines ignored::

	%revision 3
	%undo 1f0c...

	@main
	%hidden
	#<hidden patch id>
	-<popped patch id>
	+<pushed patch id>

Queues are written top first and read back top first, so every parsed patch
line is appended at the bottom of its queue.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from patchkeeper.meta.branch import Branch, Branches
from patchkeeper.meta.errors import MetadataFormatError
from patchkeeper.meta.properties import Properties

logger = logging.getLogger(__name__)

LINE_MODIFIER_PROPERTY = "%"
LINE_MODIFIER_BRANCH = "@"
LINE_MODIFIER_PATCH_HIDDEN = "#"
LINE_MODIFIER_PATCH_POPPED = "-"
LINE_MODIFIER_PATCH_PUSHED = "+"

PATCH_ID_PATTERN = re.compile(r"^(?:[0-9a-f]{40}|[0-9a-f]{64})$")


class LineKind(Enum):
	"""Kinds of metadata body lines."""

	PROPERTY_FLAG = "property_flag"
	PROPERTY_VALUE = "property_value"
	BRANCH = "branch"
	PATCH_HIDDEN = "patch_hidden"
	PATCH_POPPED = "patch_popped"
	PATCH_PUSHED = "patch_pushed"
	ERROR = "error"
	NONE = "none"


@dataclass
class Line:
	"""A classified body line."""

	kind: LineKind
	name: str = ""
	value: str = ""

	@classmethod
	def from_str(cls, line: str) -> Line:
		"""Classify a single (untrimmed) line."""
		line = line.strip()
		if not line:
			return cls(LineKind.NONE)

		modifier, rest = line[0], line[1:]
		if modifier == LINE_MODIFIER_PROPERTY:
			if " " in rest:
				name, value = rest.split(" ", 1)
				return cls(LineKind.PROPERTY_VALUE, name.strip(), value.strip())
			return cls(LineKind.PROPERTY_FLAG, rest)
		if modifier == LINE_MODIFIER_BRANCH:
			return cls(LineKind.BRANCH, rest)
		if modifier == LINE_MODIFIER_PATCH_HIDDEN:
			return cls(LineKind.PATCH_HIDDEN, rest)
		if modifier == LINE_MODIFIER_PATCH_POPPED:
			return cls(LineKind.PATCH_POPPED, rest)
		if modifier == LINE_MODIFIER_PATCH_PUSHED:
			return cls(LineKind.PATCH_PUSHED, rest)
		return cls(LineKind.ERROR, line)

	def __str__(self) -> str:
		"""Render the line, including its trailing newline."""
		match self.kind:
			case LineKind.PROPERTY_FLAG:
				return f"{LINE_MODIFIER_PROPERTY}{self.name}\n"
			case LineKind.PROPERTY_VALUE:
				return f"{LINE_MODIFIER_PROPERTY}{self.name} {self.value}\n"
			case LineKind.BRANCH:
				return f"\n{LINE_MODIFIER_BRANCH}{self.name}\n"
			case LineKind.PATCH_HIDDEN:
				return f"{LINE_MODIFIER_PATCH_HIDDEN}{self.name}\n"
			case LineKind.PATCH_POPPED:
				return f"{LINE_MODIFIER_PATCH_POPPED}{self.name}\n"
			case LineKind.PATCH_PUSHED:
				return f"{LINE_MODIFIER_PATCH_PUSHED}{self.name}\n"
			case _:
				msg = f"cannot render line of kind {self.kind.value}"
				raise ValueError(msg)


def _patch_id(nr: int, patch_id: str) -> str:
	if not PATCH_ID_PATTERN.match(patch_id):
		msg = f"invalid patch id in metadata (line {nr}, '{patch_id}')"
		raise MetadataFormatError(msg)
	return patch_id


def parse_body(data: str) -> tuple[Properties, Branches]:
	"""
	Parse a metadata body.

	Args:
		data: Body text, without the magic summary line

	Returns:
		The global properties and the branch table

	Raises:
		MetadataFormatError: On syntax errors, duplicate properties or
			branches, orphaned patch lines and invalid patch ids
	"""
	properties = Properties()
	branches = Branches()
	branch: Branch | None = None

	for nr, text in enumerate(data.splitlines()):
		scope = branch.properties if branch is not None else properties
		line = Line.from_str(text)

		match line.kind:
			case LineKind.PROPERTY_FLAG | LineKind.PROPERTY_VALUE:
				if scope.contains(line.name):
					msg = f"duplicate property in metadata (line {nr}, '{line.name}')"
					raise MetadataFormatError(msg)
				if line.kind is LineKind.PROPERTY_FLAG:
					scope.set_flag(line.name)
				else:
					scope.set(line.name, line.value)
			case LineKind.BRANCH:
				if branch is not None:
					branches.release(branch)
				if branches.contains(line.name):
					msg = f"duplicate branch in metadata (line {nr}, '{line.name}')"
					raise MetadataFormatError(msg)
				branch = branches.acquire(line.name)
			case LineKind.PATCH_HIDDEN | LineKind.PATCH_POPPED | LineKind.PATCH_PUSHED:
				if branch is None:
					msg = f"orphaned patch in metadata (line {nr}, '{line.name}')"
					raise MetadataFormatError(msg)
				patch_id = _patch_id(nr, line.name)
				if line.kind is LineKind.PATCH_HIDDEN:
					branch.hidden.add_bottom(patch_id)
				elif line.kind is LineKind.PATCH_POPPED:
					branch.popped.add_bottom(patch_id)
				else:
					branch.pushed.add_bottom(patch_id)
			case LineKind.ERROR:
				msg = f"syntax error in metadata (line {nr}, '{line.name}')"
				raise MetadataFormatError(msg)
			case LineKind.NONE:
				pass

	if branch is not None:
		branches.release(branch)

	logger.debug("Parsed metadata body with %d branch records", len(branches))
	return properties, branches


def format_properties(properties: Properties) -> str:
	"""Render properties sorted by name."""
	return "".join(
		str(Line(LineKind.PROPERTY_FLAG, name) if value is None else Line(LineKind.PROPERTY_VALUE, name, value))
		for name, value in properties
	)


def format_branch(branch: Branch) -> str:
	"""Render a branch record's properties and queues, without its header."""
	parts = [format_properties(branch.properties)]
	parts.extend(str(Line(LineKind.PATCH_HIDDEN, patch_id)) for patch_id in branch.hidden.all())
	parts.extend(str(Line(LineKind.PATCH_POPPED, patch_id)) for patch_id in branch.popped.all())
	parts.extend(str(Line(LineKind.PATCH_PUSHED, patch_id)) for patch_id in branch.pushed.all())
	return "".join(parts)


def format_body(properties: Properties, branches: Branches) -> str:
	"""
	Render a metadata body.

	Branch sections are sorted by name; records with no properties and no
	patches are left out.

	Raises:
		RuntimeError: If a branch record is still acquired
	"""
	branches.ensure_released()
	parts = [format_properties(properties)]
	for branch in branches:
		if branch.is_empty():
			continue
		parts.append(str(Line(LineKind.BRANCH, branch.name)))
		parts.append(format_branch(branch))
	return "".join(parts)
