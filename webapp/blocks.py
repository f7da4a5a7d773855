from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from quickjava import SourceLine, count_braces, find_top_level, literal_mask


@dataclass(frozen=True)
class BlockRange:
	"""Line span of a statement body.

	`start`/`end` index into the normalized line list (end exclusive). `closing` is the
	line that ends the construct: the line holding the matching `}` in brace mode, or the
	header itself when the body sits on the header line (`inline`).
	"""

	start: int
	end: int
	closing: int
	inline: Optional[str] = None

	@property
	def is_inline(self) -> bool:
		return self.inline is not None

	def __len__(self) -> int:
		return max(0, self.end - self.start)


def _first_open_brace(text: str) -> int:
	mask = literal_mask(text)
	for i, ch in enumerate(text):
		if ch == "{" and not mask[i]:
			return i
	return -1


def _net_depth(text: str) -> int:
	opens, closes = count_braces(text)
	return opens - closes


def _inline_body(text: str, brace_index: int) -> str:
	mask = literal_mask(text)
	last = -1
	for i in range(len(text) - 1, brace_index, -1):
		if text[i] == "}" and not mask[i]:
			last = i
			break
	body = text[brace_index + 1:last] if last != -1 else text[brace_index + 1:]
	return body.strip()


def locate_block(lines: Sequence[SourceLine], header_index: int, rest: Optional[str] = None) -> BlockRange:
	"""Find the body of the control-flow header at `header_index`.

	Depth is counted per line, not per character: a line holding both `{` and `}` only
	contributes its net delta, except that a leading `}` is applied first. This is not a parser; bodies that do not follow the
	one-statement-per-line layout are located on a best-effort basis.

	`rest` is the header text after its condition, when known. A non-brace `rest`
	(`if (x > 0) y = 1;`) is returned as an inline body; a brace `rest` is where
	the depth count starts.
	"""
	head = None
	if rest is not None:
		trailing = rest.strip()
		if trailing and not trailing.startswith("{"):
			return BlockRange(header_index + 1, header_index + 1, header_index, inline=trailing)
		if trailing:
			head = trailing

	if head is not None:
		brace_line = header_index
	else:
		brace_line = -1
		if _first_open_brace(lines[header_index].text) != -1:
			brace_line = header_index
		else:
			for j in range(header_index + 1, len(lines)):
				if not lines[j].is_code:
					continue
				if lines[j].text.startswith("{"):
					brace_line = j
				else:
					return BlockRange(j, j + 1, j)
				break
		if brace_line == -1:
			return BlockRange(len(lines), len(lines), len(lines))
		text = lines[brace_line].text
		head = text[_first_open_brace(text):]

	depth = _net_depth(head)
	if depth <= 0:
		return BlockRange(brace_line + 1, brace_line + 1, brace_line, inline=_inline_body(head, 0))

	for j in range(brace_line + 1, len(lines)):
		if not lines[j].is_code:
			continue
		text = lines[j].text
		# A leading `}` closes before the rest of the line opens (`} else {`).
		if text.startswith("}"):
			depth -= 1
			if depth <= 0:
				return BlockRange(brace_line + 1, j, j)
			text = text[1:]
		depth += _net_depth(text)
		if depth <= 0:
			return BlockRange(brace_line + 1, j, j)
	return BlockRange(brace_line + 1, len(lines), len(lines))


def _is_word_char(ch: str) -> bool:
	return ch.isalnum() or ch in "_$"


def split_inline_else(text: str) -> Tuple[str, Optional[str]]:
	"""Split a one-line `A; else B;` or `{ A; } else { B; }` at its top-level `else`.

	Returns the then-part and the text after `else`, or `(text, None)` when there is none.
	"""
	start = 0
	while True:
		index = find_top_level(text, "else", start)
		if index == -1:
			return text, None
		before = text[index - 1] if index > 0 else " "
		after = text[index + 4] if index + 4 < len(text) else " "
		if not _is_word_char(before) and not _is_word_char(after):
			return text[:index].strip(), text[index + 4:].strip()
		start = index + 4
