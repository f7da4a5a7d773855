"""QuickJava front end: diagnostics, line lexer, source normalizer, structure checks and statement classifier."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger("quickjava.frontend")


# ---------------------------------------------------------------------------
# Diagnostic infrastructure


class Severity(Enum):
	WARNING = auto()
	ERROR = auto()


@dataclass
class Diagnostic:
	severity: Severity
	message: str
	line: Optional[int] = None
	hint: Optional[str] = None

	def to_dict(self) -> Dict[str, Any]:
		return {
			"severity": self.severity.name,
			"message": self.message,
			"line": self.line,
			"hint": self.hint,
		}


class DiagnosticEngine:
	def __init__(self) -> None:
		self._items: List[Diagnostic] = []

	@property
	def items(self) -> List[Diagnostic]:
		return self._items

	@property
	def errors(self) -> List[Diagnostic]:
		return [d for d in self._items if d.severity == Severity.ERROR]

	@property
	def warnings(self) -> List[Diagnostic]:
		return [d for d in self._items if d.severity == Severity.WARNING]

	def has_errors(self) -> bool:
		return any(d.severity == Severity.ERROR for d in self._items)

	def report(self, severity: Severity, message: str, line: Optional[int] = None, hint: Optional[str] = None) -> None:
		self._items.append(Diagnostic(severity, message, line, hint))

	def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
		self._items.extend(diagnostics)

	def clear(self) -> None:
		self._items.clear()


# ---------------------------------------------------------------------------
# Literal-aware text helpers


_BRACKETS = {"(": ")", "[": "]", "{": "}"}


def literal_mask(text: str) -> List[bool]:
	"""Mark every character that belongs to a string or char literal (quotes included)."""
	mask = [False] * len(text)
	quote: Optional[str] = None
	i = 0
	while i < len(text):
		ch = text[i]
		if quote:
			mask[i] = True
			if ch == "\\" and i + 1 < len(text):
				mask[i + 1] = True
				i += 2
				continue
			if ch == quote:
				quote = None
		elif ch in "\"'":
			quote = ch
			mask[i] = True
		i += 1
	return mask


def count_braces(text: str) -> Tuple[int, int]:
	mask = literal_mask(text)
	opens = sum(1 for ch, quoted in zip(text, mask) if ch == "{" and not quoted)
	closes = sum(1 for ch, quoted in zip(text, mask) if ch == "}" and not quoted)
	return opens, closes


def find_closing(text: str, open_index: int) -> int:
	"""Index of the bracket matching the one at `open_index`, or -1."""
	opener = text[open_index]
	closer = _BRACKETS[opener]
	mask = literal_mask(text)
	depth = 0
	for i in range(open_index, len(text)):
		if mask[i]:
			continue
		if text[i] == opener:
			depth += 1
		elif text[i] == closer:
			depth -= 1
			if depth == 0:
				return i
	return -1


def find_top_level(text: str, needle: str, start: int = 0) -> int:
	"""First index of `needle` outside literals and brackets, or -1."""
	mask = literal_mask(text)
	depth = 0
	for i in range(start, len(text)):
		if mask[i]:
			continue
		ch = text[i]
		if ch in "([{":
			depth += 1
		elif ch in ")]}":
			depth -= 1
		elif depth == 0 and text.startswith(needle, i):
			return i
	return -1


def split_top_level(text: str, separator: str) -> List[str]:
	parts: List[str] = []
	mask = literal_mask(text)
	depth = 0
	start = 0
	i = 0
	while i < len(text):
		ch = text[i]
		if not mask[i]:
			if ch in "([{":
				depth += 1
			elif ch in ")]}":
				depth -= 1
			elif depth == 0 and text.startswith(separator, i):
				parts.append(text[start:i])
				i += len(separator)
				start = i
				continue
		i += 1
	parts.append(text[start:])
	return parts


def strip_comments(text: str) -> Tuple[str, bool]:
	"""Remove `//` and `/* */` comments outside literals.

	Returns the remaining code and whether an unterminated block comment starts on this line.
	"""
	mask = literal_mask(text)
	out: List[str] = []
	i = 0
	while i < len(text):
		if not mask[i] and text.startswith("//", i):
			break
		if not mask[i] and text.startswith("/*", i):
			end = text.find("*/", i + 2)
			if end == -1:
				return "".join(out).strip(), True
			i = end + 2
			continue
		out.append(text[i])
		i += 1
	return "".join(out).strip(), False


# ---------------------------------------------------------------------------
# Lexer


class TokenKind(Enum):
	IDENT = auto()
	NUMBER = auto()
	STRING = auto()
	CHAR_CONST = auto()
	PLUS = auto()
	MINUS = auto()
	STAR = auto()
	SLASH = auto()
	PERCENT = auto()
	ASSIGN = auto()
	PLUS_ASSIGN = auto()
	MINUS_ASSIGN = auto()
	STAR_ASSIGN = auto()
	SLASH_ASSIGN = auto()
	PERCENT_ASSIGN = auto()
	INCREMENT = auto()
	DECREMENT = auto()
	EQ = auto()
	NEQ = auto()
	GT = auto()
	GTE = auto()
	LT = auto()
	LTE = auto()
	AND = auto()
	OR = auto()
	NOT = auto()
	LPAREN = auto()
	RPAREN = auto()
	LBRACKET = auto()
	RBRACKET = auto()
	LBRACE = auto()
	RBRACE = auto()
	SEMI = auto()
	COMMA = auto()
	DOT = auto()
	COLON = auto()
	QUESTION = auto()
	EOF = auto()
	UNKNOWN = auto()


SYMBOLS: Dict[str, TokenKind] = {
	"+": TokenKind.PLUS,
	"-": TokenKind.MINUS,
	"*": TokenKind.STAR,
	"/": TokenKind.SLASH,
	"%": TokenKind.PERCENT,
	"=": TokenKind.ASSIGN,
	"+=": TokenKind.PLUS_ASSIGN,
	"-=": TokenKind.MINUS_ASSIGN,
	"*=": TokenKind.STAR_ASSIGN,
	"/=": TokenKind.SLASH_ASSIGN,
	"%=": TokenKind.PERCENT_ASSIGN,
	"++": TokenKind.INCREMENT,
	"--": TokenKind.DECREMENT,
	"==": TokenKind.EQ,
	"!=": TokenKind.NEQ,
	">": TokenKind.GT,
	">=": TokenKind.GTE,
	"<": TokenKind.LT,
	"<=": TokenKind.LTE,
	"&&": TokenKind.AND,
	"||": TokenKind.OR,
	"!": TokenKind.NOT,
	"(": TokenKind.LPAREN,
	")": TokenKind.RPAREN,
	"[": TokenKind.LBRACKET,
	"]": TokenKind.RBRACKET,
	"{": TokenKind.LBRACE,
	"}": TokenKind.RBRACE,
	";": TokenKind.SEMI,
	",": TokenKind.COMMA,
	".": TokenKind.DOT,
	":": TokenKind.COLON,
	"?": TokenKind.QUESTION,
}

ASSIGN_OPERATORS = {
	TokenKind.ASSIGN,
	TokenKind.PLUS_ASSIGN,
	TokenKind.MINUS_ASSIGN,
	TokenKind.STAR_ASSIGN,
	TokenKind.SLASH_ASSIGN,
	TokenKind.PERCENT_ASSIGN,
}

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "0": "\0", "'": "'", '"': '"', "\\": "\\"}


@dataclass
class Token:
	kind: TokenKind
	lexeme: str
	column: int
	value: Optional[Any] = None


class Lexer:
	"""Tokenizes a single source line. Unknown characters become UNKNOWN tokens instead of errors."""

	def __init__(self, text: str) -> None:
		self.text = text
		self.length = len(text)
		self.index = 0

	def tokenize(self) -> List[Token]:
		tokens: List[Token] = []
		while not self._is_eof():
			ch = self._peek()
			if ch.isspace():
				self.index += 1
			elif ch.isalpha() or ch in "_$":
				tokens.append(self._consume_identifier())
			elif ch.isdigit():
				tokens.append(self._consume_number())
			elif ch == '"':
				tokens.append(self._consume_quoted('"', TokenKind.STRING))
			elif ch == "'":
				tokens.append(self._consume_quoted("'", TokenKind.CHAR_CONST))
			else:
				tokens.append(self._consume_symbol())
		tokens.append(Token(TokenKind.EOF, "", self.index))
		return tokens

	def _consume_identifier(self) -> Token:
		start = self.index
		while not self._is_eof() and (self._peek().isalnum() or self._peek() in "_$"):
			self.index += 1
		return Token(TokenKind.IDENT, self.text[start:self.index], start)

	def _consume_number(self) -> Token:
		start = self.index
		while not self._is_eof() and self._peek().isdigit():
			self.index += 1
		is_float = False
		if not self._is_eof() and self._peek() == "." and self._peek_next().isdigit():
			is_float = True
			self.index += 1
			while not self._is_eof() and self._peek().isdigit():
				self.index += 1
		digits = self.text[start:self.index]
		if not self._is_eof() and self._peek() in "fFdD":
			is_float = True
			self.index += 1
		elif not self._is_eof() and self._peek() in "lL":
			self.index += 1
		value: Any = float(digits) if is_float else int(digits)
		return Token(TokenKind.NUMBER, self.text[start:self.index], start, value)

	def _consume_quoted(self, quote: str, kind: TokenKind) -> Token:
		start = self.index
		self.index += 1
		chars: List[str] = []
		while not self._is_eof() and self._peek() != quote:
			ch = self._peek()
			self.index += 1
			if ch == "\\" and not self._is_eof():
				esc = self._peek()
				self.index += 1
				chars.append(_ESCAPES.get(esc, esc))
			else:
				chars.append(ch)
		if self._is_eof():
			return Token(TokenKind.UNKNOWN, self.text[start:], start)
		self.index += 1
		value = "".join(chars)
		if kind == TokenKind.CHAR_CONST and len(value) != 1:
			return Token(TokenKind.UNKNOWN, self.text[start:self.index], start)
		return Token(kind, self.text[start:self.index], start, value)

	def _consume_symbol(self) -> Token:
		start = self.index
		candidate = self.text[start:start + 2]
		if len(candidate) == 2 and candidate in SYMBOLS:
			self.index += 2
			return Token(SYMBOLS[candidate], candidate, start)
		ch = self.text[start]
		self.index += 1
		if ch in SYMBOLS:
			return Token(SYMBOLS[ch], ch, start)
		return Token(TokenKind.UNKNOWN, ch, start)

	def _peek(self) -> str:
		return self.text[self.index]

	def _peek_next(self) -> str:
		if self.index + 1 >= self.length:
			return ""
		return self.text[self.index + 1]

	def _is_eof(self) -> bool:
		return self.index >= self.length


# ---------------------------------------------------------------------------
# Source normalizer


@dataclass
class SourceLine:
	number: int
	text: str
	is_comment: bool = False

	@property
	def is_code(self) -> bool:
		return bool(self.text) and not self.is_comment


def normalize_source(source: str) -> List[SourceLine]:
	"""Split source into numbered, trimmed lines with comments flagged and trailing comments removed."""
	code = source.replace("\r\n", "\n").replace("\r", "\n").strip()
	lines: List[SourceLine] = []
	in_block_comment = False
	for number, raw in enumerate(code.split("\n"), start=1):
		text = raw.strip()
		if in_block_comment:
			end = text.find("*/")
			if end == -1:
				lines.append(SourceLine(number, text, is_comment=True))
				continue
			in_block_comment = False
			text = text[end + 2:].strip()
			if not text:
				lines.append(SourceLine(number, "", is_comment=True))
				continue
		if text.startswith("//") or text.startswith("*"):
			lines.append(SourceLine(number, text, is_comment=True))
			continue
		if text.startswith("/*"):
			in_block_comment = "*/" not in text[2:]
			lines.append(SourceLine(number, text, is_comment=True))
			continue
		stripped, opens_block = strip_comments(text)
		if opens_block:
			in_block_comment = True
		lines.append(SourceLine(number, stripped))
	return lines


# ---------------------------------------------------------------------------
# Structure checks


CLASS_RE = re.compile(r"\bclass\s+([A-Za-z_$][\w$]*)")
MAIN_RE = re.compile(r"\bvoid\s+main\s*\(")
PRINT_CALL_RE = re.compile(r"(?:\bSystem\s*\.\s*out\s*\.\s*|(?<![\w.$]))print(?:ln|f)?\s*\(")


@dataclass
class StructureInfo:
	class_name: Optional[str]
	has_main: bool
	open_braces: int
	close_braces: int
	line_count: int
	print_count: int


def check_structure(source: str, lines: List[SourceLine], diagnostics: DiagnosticEngine, entry_class: str = "Main") -> StructureInfo:
	class_match = CLASS_RE.search(source)
	class_name = class_match.group(1) if class_match else None
	has_main = MAIN_RE.search(source) is not None
	open_braces = source.count("{")
	close_braces = source.count("}")

	if not source.strip():
		diagnostics.report(Severity.ERROR, "No code to execute!", hint="Please write some Java code first.")
	else:
		if class_name is None:
			diagnostics.report(Severity.ERROR, 'Missing "public class" declaration', hint="Wrap your code in: public class Main { ... }")
		if not has_main:
			diagnostics.report(Severity.ERROR, "Missing main method: public static void main(String[] args)")
		if class_name is not None and class_name != entry_class:
			line = _line_of(lines, CLASS_RE)
			diagnostics.report(Severity.WARNING, f'Class name is "{class_name}" instead of "{entry_class}"', line)
		if open_braces != close_braces:
			diagnostics.report(
				Severity.ERROR,
				f"Unbalanced braces: {{{open_braces} vs }}{close_braces}",
				hint="Check for a missing closing brace or an extra '{' earlier.",
			)

	print_count = sum(1 for line in lines if line.is_code and PRINT_CALL_RE.search(line.text))
	return StructureInfo(
		class_name=class_name,
		has_main=has_main,
		open_braces=open_braces,
		close_braces=close_braces,
		line_count=len(lines),
		print_count=print_count,
	)


def _line_of(lines: List[SourceLine], pattern: re.Pattern) -> Optional[int]:
	for line in lines:
		if line.is_code and pattern.search(line.text):
			return line.number
	return None


# ---------------------------------------------------------------------------
# Statement classifier


class StatementKind(Enum):
	BLANK = auto()
	COMMENT = auto()
	PACKAGE_OR_IMPORT = auto()
	CLASS_HEADER = auto()
	METHOD_HEADER = auto()
	BLOCK_OPEN = auto()
	BLOCK_CLOSE = auto()
	PRINT = auto()
	DECLARATION = auto()
	ASSIGNMENT = auto()
	INCREMENT = auto()
	IF = auto()
	ELSE = auto()
	FOR = auto()
	FOR_EACH = auto()
	WHILE = auto()
	DO = auto()
	SWITCH = auto()
	CASE = auto()
	BREAK = auto()
	CONTINUE = auto()
	RETURN = auto()
	UNKNOWN = auto()


CONTROL_KINDS = {StatementKind.IF, StatementKind.FOR, StatementKind.FOR_EACH, StatementKind.WHILE, StatementKind.SWITCH, StatementKind.DO}

MODIFIERS = {"public", "private", "protected", "static", "final", "abstract", "synchronized", "native", "strictfp", "transient", "volatile"}
TYPE_DECLARATION_WORDS = {"class", "interface", "enum", "record"}
PRINT_METHODS = {"print", "println", "printf"}

_DECLARATOR_RE = re.compile(r"^([A-Za-z_$][\w$]*)\s*((?:\[\s*\])*)\s*(?:=(.*))?$", re.DOTALL)


@dataclass
class Statement:
	kind: StatementKind
	text: str
	name: Optional[str] = None
	type_name: Optional[str] = None
	operator: Optional[str] = None
	expression: Optional[str] = None
	rest: Optional[str] = None
	parts: List[str] = field(default_factory=list)
	declarators: List[Tuple[str, Optional[str]]] = field(default_factory=list)


def _strip_semicolon(text: str) -> str:
	text = text.strip()
	while text.endswith(";"):
		text = text[:-1].rstrip()
	return text


def classify_statement(text: str) -> Statement:
	"""Tag a trimmed line (or inline fragment) with its statement kind and extract its parts."""
	text = text.strip()
	if not text:
		return Statement(StatementKind.BLANK, text)
	tokens = Lexer(text).tokenize()
	first = tokens[0]

	if first.kind == TokenKind.RBRACE:
		k = 0
		while tokens[k].kind == TokenKind.RBRACE:
			k += 1
		if tokens[k].kind == TokenKind.IDENT and tokens[k].lexeme == "else":
			return _classify_else(text, tokens[k])
		return Statement(StatementKind.BLOCK_CLOSE, text)
	if first.kind == TokenKind.LBRACE:
		return Statement(StatementKind.BLOCK_OPEN, text)
	if first.kind in (TokenKind.INCREMENT, TokenKind.DECREMENT):
		if tokens[1].kind == TokenKind.IDENT and tokens[2].kind in (TokenKind.SEMI, TokenKind.EOF):
			return Statement(StatementKind.INCREMENT, text, name=tokens[1].lexeme, operator=first.lexeme)
		return Statement(StatementKind.UNKNOWN, text)
	if first.kind != TokenKind.IDENT:
		return Statement(StatementKind.UNKNOWN, text)

	word = first.lexeme
	if word in ("package", "import"):
		return Statement(StatementKind.PACKAGE_OR_IMPORT, text)
	if word == "if":
		return _classify_parenthesized(StatementKind.IF, text, tokens)
	if word == "else":
		return _classify_else(text, first)
	if word == "while":
		return _classify_parenthesized(StatementKind.WHILE, text, tokens)
	if word == "switch":
		return _classify_parenthesized(StatementKind.SWITCH, text, tokens)
	if word == "for":
		return _classify_for(text, tokens)
	if word == "do" and tokens[1].kind in (TokenKind.LBRACE, TokenKind.EOF):
		return Statement(StatementKind.DO, text, rest=text[2:].strip())
	if word in ("case", "default"):
		return _classify_case(text, first)
	if word in ("break", "continue") and tokens[1].kind in (TokenKind.SEMI, TokenKind.EOF):
		return Statement(StatementKind.BREAK if word == "break" else StatementKind.CONTINUE, text)
	if word == "return":
		value = _strip_semicolon(text[len("return"):])
		return Statement(StatementKind.RETURN, text, expression=value or None)

	k = 0
	while tokens[k].kind == TokenKind.IDENT and tokens[k].lexeme in MODIFIERS:
		k += 1
	head = tokens[k]
	if head.kind != TokenKind.IDENT:
		return Statement(StatementKind.UNKNOWN, text)
	if head.lexeme in TYPE_DECLARATION_WORDS and tokens[k + 1].kind == TokenKind.IDENT:
		return Statement(StatementKind.CLASS_HEADER, text, name=tokens[k + 1].lexeme)

	printed = _classify_print(text, tokens, k)
	if printed is not None:
		return printed

	nxt = tokens[k + 1]
	if k == 0 and nxt.kind in ASSIGN_OPERATORS:
		value = _strip_semicolon(text[nxt.column + len(nxt.lexeme):])
		return Statement(StatementKind.ASSIGNMENT, text, name=head.lexeme, operator=nxt.lexeme, expression=value)
	if k == 0 and nxt.kind in (TokenKind.INCREMENT, TokenKind.DECREMENT) and tokens[k + 2].kind in (TokenKind.SEMI, TokenKind.EOF):
		return Statement(StatementKind.INCREMENT, text, name=head.lexeme, operator=nxt.lexeme)

	return _classify_typed(text, tokens, k)


def _classify_parenthesized(kind: StatementKind, text: str, tokens: List[Token]) -> Statement:
	if tokens[1].kind != TokenKind.LPAREN:
		return Statement(StatementKind.UNKNOWN, text)
	open_index = tokens[1].column
	close_index = find_closing(text, open_index)
	if close_index == -1:
		return Statement(StatementKind.UNKNOWN, text)
	condition = text[open_index + 1:close_index].strip()
	rest = text[close_index + 1:].strip()
	return Statement(kind, text, expression=condition, rest=rest)


def _classify_for(text: str, tokens: List[Token]) -> Statement:
	header = _classify_parenthesized(StatementKind.FOR, text, tokens)
	if header.kind == StatementKind.UNKNOWN:
		return header
	inner = header.expression or ""
	parts = [p.strip() for p in split_top_level(inner, ";")]
	if len(parts) == 3:
		header.parts = parts
		header.expression = parts[1]
		return header
	if find_top_level(inner, ":") != -1:
		return Statement(StatementKind.FOR_EACH, text, expression=inner, rest=header.rest)
	return Statement(StatementKind.UNKNOWN, text)


def _classify_else(text: str, else_token: Token) -> Statement:
	rest = text[else_token.column + len("else"):].strip()
	return Statement(StatementKind.ELSE, text, rest=rest)


def _classify_case(text: str, first: Token) -> Statement:
	colon = find_top_level(text, ":", first.column + len(first.lexeme))
	if colon == -1:
		return Statement(StatementKind.UNKNOWN, text)
	label = text[first.column + len(first.lexeme):colon].strip()
	rest = text[colon + 1:].strip()
	if first.lexeme == "default":
		return Statement(StatementKind.CASE, text, name="default", rest=rest)
	return Statement(StatementKind.CASE, text, name="case", expression=label, rest=rest)


def _classify_print(text: str, tokens: List[Token], k: int) -> Optional[Statement]:
	if k != 0:
		return None
	index = 0
	if (
		tokens[0].lexeme == "System"
		and tokens[1].kind == TokenKind.DOT
		and tokens[2].lexeme == "out"
		and tokens[3].kind == TokenKind.DOT
	):
		index = 4
	method = tokens[index]
	if method.kind != TokenKind.IDENT or method.lexeme not in PRINT_METHODS:
		return None
	paren = tokens[index + 1]
	if paren.kind != TokenKind.LPAREN:
		return None
	close_index = find_closing(text, paren.column)
	if close_index == -1:
		return None
	argument = text[paren.column + 1:close_index].strip()
	return Statement(StatementKind.PRINT, text, name=method.lexeme, expression=argument)


def _classify_typed(text: str, tokens: List[Token], k: int) -> Statement:
	type_name = tokens[k].lexeme
	j = k + 1
	if tokens[j].kind == TokenKind.LT:
		depth = 0
		while tokens[j].kind != TokenKind.EOF:
			if tokens[j].kind == TokenKind.LT:
				depth += 1
			elif tokens[j].kind == TokenKind.GT:
				depth -= 1
				if depth == 0:
					j += 1
					break
			j += 1
		type_name = text[tokens[k].column:tokens[j].column].replace(" ", "")
	while tokens[j].kind == TokenKind.LBRACKET and tokens[j + 1].kind == TokenKind.RBRACKET:
		type_name += "[]"
		j += 2
	name = tokens[j]
	if name.kind != TokenKind.IDENT:
		return Statement(StatementKind.UNKNOWN, text)
	after = tokens[j + 1]
	if after.kind == TokenKind.LPAREN:
		if text.rstrip().endswith(";"):
			return Statement(StatementKind.UNKNOWN, text)
		return Statement(StatementKind.METHOD_HEADER, text, name=name.lexeme, type_name=type_name)
	if after.kind not in (TokenKind.ASSIGN, TokenKind.SEMI, TokenKind.COMMA, TokenKind.EOF, TokenKind.LBRACKET):
		return Statement(StatementKind.UNKNOWN, text)
	declarators: List[Tuple[str, Optional[str]]] = []
	for piece in split_top_level(_strip_semicolon(text[name.column:]), ","):
		match = _DECLARATOR_RE.match(piece.strip())
		if not match:
			return Statement(StatementKind.UNKNOWN, text)
		if match.group(2):
			type_name += "[]"
		value = match.group(3)
		declarators.append((match.group(1), value.strip() if value is not None else None))
	return Statement(
		StatementKind.DECLARATION,
		text,
		name=declarators[0][0],
		type_name=type_name,
		expression=declarators[0][1],
		declarators=declarators,
	)


def classify_line(line: SourceLine) -> Statement:
	if line.is_comment:
		return Statement(StatementKind.COMMENT, line.text)
	return classify_statement(line.text)


# ---------------------------------------------------------------------------
# Compilation pipeline


@dataclass
class CompilationArtifacts:
	lines: List[SourceLine]
	statements: List[Statement]
	structure: StructureInfo
	diagnostics: List[Diagnostic]
	duration_ms: float

	@property
	def has_errors(self) -> bool:
		return any(d.severity == Severity.ERROR for d in self.diagnostics)


class QuickJavaEngine:
	def __init__(self, entry_class: str = "Main") -> None:
		self.entry_class = entry_class

	def compile(self, source: str) -> CompilationArtifacts:
		diagnostics = DiagnosticEngine()
		start = time.perf_counter()
		lines = normalize_source(source)
		structure = check_structure(source, lines, diagnostics, self.entry_class)
		statements = [classify_line(line) for line in lines]
		duration_ms = (time.perf_counter() - start) * 1000
		logger.debug("checked %d lines, %d diagnostics", len(lines), len(diagnostics.items))
		return CompilationArtifacts(
			lines=lines,
			statements=statements,
			structure=structure,
			diagnostics=diagnostics.items,
			duration_ms=duration_ms,
		)
