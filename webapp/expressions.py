from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

from quickjava import Lexer, Token, TokenKind, find_closing, literal_mask, split_top_level

logger = logging.getLogger("quickjava.expressions")


class EvaluationError(Exception):
	"""A single expression or condition could not be evaluated."""


class UnsupportedConditionError(EvaluationError):
	pass


# ---------------------------------------------------------------------------
# Tagged values


class ValueTag(Enum):
	INT = auto()
	FLOAT = auto()
	TEXT = auto()
	BOOL = auto()
	CHAR = auto()


TYPE_TAGS: Dict[str, ValueTag] = {
	"int": ValueTag.INT,
	"long": ValueTag.INT,
	"short": ValueTag.INT,
	"byte": ValueTag.INT,
	"Integer": ValueTag.INT,
	"Long": ValueTag.INT,
	"double": ValueTag.FLOAT,
	"float": ValueTag.FLOAT,
	"Double": ValueTag.FLOAT,
	"Float": ValueTag.FLOAT,
	"String": ValueTag.TEXT,
	"boolean": ValueTag.BOOL,
	"Boolean": ValueTag.BOOL,
	"char": ValueTag.CHAR,
	"Character": ValueTag.CHAR,
}


def format_double(value: float) -> str:
	"""Render a float the way Java's Double.toString does."""
	if math.isnan(value):
		return "NaN"
	if math.isinf(value):
		return "Infinity" if value > 0 else "-Infinity"
	magnitude = abs(value)
	if value == 0 or 1e-3 <= magnitude < 1e7:
		return repr(float(value))
	sign, digits, exponent = Decimal(repr(float(value))).normalize().as_tuple()
	scientific = len(digits) + exponent - 1
	mantissa = "".join(str(d) for d in digits[1:]) or "0"
	return f"{'-' if sign else ''}{digits[0]}.{mantissa}E{scientific}"


@dataclass(frozen=True)
class TaggedValue:
	tag: ValueTag
	value: Any

	@property
	def is_numeric(self) -> bool:
		return self.tag in (ValueTag.INT, ValueTag.FLOAT, ValueTag.CHAR)

	@property
	def is_integral(self) -> bool:
		return self.tag in (ValueTag.INT, ValueTag.CHAR)

	def as_number(self) -> Any:
		if self.tag == ValueTag.CHAR:
			return ord(self.value) if self.value else 0
		if self.tag in (ValueTag.INT, ValueTag.FLOAT):
			return self.value
		raise EvaluationError(f"bad operand type {self.tag.name.lower()} for arithmetic")

	def render(self) -> str:
		if self.tag == ValueTag.FLOAT:
			return format_double(self.value)
		if self.tag == ValueTag.BOOL:
			return "true" if self.value else "false"
		return str(self.value)


LONG_MIN = -(1 << 63)
LONG_MAX = (1 << 63) - 1


def wrap_long(value: int) -> int:
	"""Two's-complement wrap to 64 bits, as Java long arithmetic overflows."""
	return (value + (1 << 63)) % (1 << 64) - (1 << 63)


def to_long(number: Any) -> int:
	"""Truncate toward zero; NaN becomes 0 and out-of-range doubles saturate, as a Java (long) cast does."""
	if isinstance(number, float):
		if math.isnan(number):
			return 0
		if number >= LONG_MAX:
			return LONG_MAX
		if number <= LONG_MIN:
			return LONG_MIN
	return wrap_long(math.trunc(number))


def to_char(number: Any) -> str:
	return chr(to_long(number) & 0xFFFF)


def int_value(value: int) -> TaggedValue:
	return TaggedValue(ValueTag.INT, to_long(value))


def float_value(value: float) -> TaggedValue:
	return TaggedValue(ValueTag.FLOAT, float(value))


def text_value(value: str) -> TaggedValue:
	return TaggedValue(ValueTag.TEXT, value)


def bool_value(value: bool) -> TaggedValue:
	return TaggedValue(ValueTag.BOOL, bool(value))


def default_value(tag: ValueTag) -> TaggedValue:
	if tag == ValueTag.INT:
		return int_value(0)
	if tag == ValueTag.FLOAT:
		return float_value(0.0)
	if tag == ValueTag.BOOL:
		return bool_value(False)
	if tag == ValueTag.CHAR:
		return TaggedValue(ValueTag.CHAR, "\0")
	return text_value("")


def coerce(value: TaggedValue, tag: ValueTag) -> TaggedValue:
	"""Convert `value` to a variable's declared tag, the way an implicit Java conversion would."""
	if value.tag == tag:
		return value
	if tag == ValueTag.TEXT:
		return text_value(value.render())
	if tag == ValueTag.INT and value.is_numeric:
		return int_value(value.as_number())
	if tag == ValueTag.FLOAT and value.is_numeric:
		return float_value(value.as_number())
	if tag == ValueTag.CHAR:
		if value.tag == ValueTag.INT:
			return TaggedValue(ValueTag.CHAR, to_char(value.value))
		if value.tag == ValueTag.TEXT and len(value.value) == 1:
			return TaggedValue(ValueTag.CHAR, value.value)
	if tag == ValueTag.BOOL and value.tag == ValueTag.TEXT and value.value in ("true", "false"):
		return bool_value(value.value == "true")
	raise EvaluationError(f"incompatible types: {value.tag.name.lower()} cannot be converted to {tag.name.lower()}")


# ---------------------------------------------------------------------------
# Environment


class Environment:
	"""Flat, run-scoped identifier table. Declared tags are remembered so assignments are coerced."""

	def __init__(self) -> None:
		self._values: Dict[str, TaggedValue] = {}
		self._tags: Dict[str, ValueTag] = {}

	def declare(self, name: str, tag: ValueTag, value: Optional[TaggedValue] = None) -> TaggedValue:
		stored = coerce(value, tag) if value is not None else default_value(tag)
		self._tags[name] = tag
		self._values[name] = stored
		return stored

	def assign(self, name: str, value: TaggedValue) -> TaggedValue:
		tag = self._tags.get(name)
		stored = coerce(value, tag) if tag is not None else value
		self._values[name] = stored
		return stored

	def lookup(self, name: str) -> Optional[TaggedValue]:
		return self._values.get(name)

	def names(self) -> List[str]:
		return list(self._values.keys())

	def snapshot(self) -> Dict[str, str]:
		return {name: value.render() for name, value in self._values.items()}

	def __contains__(self, name: object) -> bool:
		return name in self._values

	def __len__(self) -> int:
		return len(self._values)


# ---------------------------------------------------------------------------
# Operators and builtins


def _truncating_div(a: int, b: int) -> int:
	q = abs(a) // abs(b)
	return q if (a >= 0) == (b >= 0) else -q


def apply_operator(operator: str, left: TaggedValue, right: TaggedValue) -> TaggedValue:
	if operator == "+" and (left.tag == ValueTag.TEXT or right.tag == ValueTag.TEXT):
		return text_value(left.render() + right.render())
	a = left.as_number()
	b = right.as_number()
	integral = left.is_integral and right.is_integral
	if operator == "+":
		result = a + b
	elif operator == "-":
		result = a - b
	elif operator == "*":
		result = a * b
	elif operator == "/":
		if integral:
			if b == 0:
				raise EvaluationError("/ by zero")
			return int_value(_truncating_div(a, b))
		if b == 0:
			if a == 0 or math.isnan(a):
				return float_value(math.nan)
			return float_value(math.copysign(math.inf, a) * math.copysign(1.0, b))
		return float_value(a / b)
	elif operator == "%":
		if integral:
			if b == 0:
				raise EvaluationError("/ by zero")
			return int_value(a - b * _truncating_div(a, b))
		if b == 0 or math.isinf(a):
			return float_value(math.nan)
		return float_value(math.fmod(a, b))
	else:
		raise EvaluationError(f"unsupported operator '{operator}'")
	return int_value(result) if integral else float_value(result)


_FORMAT_RE = re.compile(r"%([-#+ 0,(]*)(\d+)?(\.\d+)?([a-zA-Z%])")


def java_format(pattern: str, args: List[TaggedValue]) -> str:
	"""Subset of java.util.Formatter: %d %s %f %e %x %c %b %n %%."""
	remaining = list(args)

	def _next() -> TaggedValue:
		if not remaining:
			raise EvaluationError(f"missing format argument for '{pattern}'")
		return remaining.pop(0)

	def _replace(match: "re.Match[str]") -> str:
		flags, width, precision, conversion = match.groups()
		flags = (flags or "").replace(",", "").replace("(", "")
		spec = "%" + flags + (width or "") + (precision or "")
		if conversion == "n":
			return "\n"
		if conversion == "%":
			return "%"
		value = _next()
		if conversion in "dxXo":
			return (spec + conversion) % to_long(value.as_number())
		if conversion in "feEgG":
			return (spec + conversion) % float(value.as_number())
		if conversion == "c":
			return (spec + "s") % (value.value if value.tag == ValueTag.CHAR else to_char(value.as_number()))
		if conversion in "sSbB":
			rendered = (spec + "s") % value.render()
			return rendered.upper() if conversion.isupper() else rendered
		raise EvaluationError(f"unknown format conversion '%{conversion}'")

	return _FORMAT_RE.sub(_replace, pattern)


def _numeric_args(name: str, args: List[TaggedValue], count: Optional[int] = None) -> List[TaggedValue]:
	if count is not None and len(args) != count:
		raise EvaluationError(f"{name}() expects {count} argument(s), got {len(args)}")
	if not args:
		raise EvaluationError(f"{name}() expects arguments")
	for arg in args:
		if not arg.is_numeric:
			raise EvaluationError(f"{name}() expects numeric arguments")
	return args


def _fold(operator: str) -> Callable[[List[TaggedValue]], TaggedValue]:
	def _call(args: List[TaggedValue]) -> TaggedValue:
		values = _numeric_args(operator, args)
		result = values[0]
		for value in values[1:]:
			result = apply_operator(operator, result, value)
		return result

	return _call


def _extreme(pick: Callable[..., Any]) -> Callable[[List[TaggedValue]], TaggedValue]:
	def _call(args: List[TaggedValue]) -> TaggedValue:
		values = _numeric_args("max/min", args, 2)
		chosen = pick(v.as_number() for v in values)
		if all(v.is_integral for v in values):
			return int_value(chosen)
		return float_value(chosen)

	return _call


def _abs(args: List[TaggedValue]) -> TaggedValue:
	(value,) = _numeric_args("abs", args, 1)
	if value.is_integral:
		return int_value(abs(value.as_number()))
	return float_value(abs(value.as_number()))


def _pow(args: List[TaggedValue]) -> TaggedValue:
	base, exponent = _numeric_args("pow", args, 2)
	try:
		return float_value(math.pow(base.as_number(), exponent.as_number()))
	except (OverflowError, ValueError):
		return float_value(math.nan)


def _sqrt(args: List[TaggedValue]) -> TaggedValue:
	(value,) = _numeric_args("sqrt", args, 1)
	number = value.as_number()
	return float_value(math.sqrt(number) if number >= 0 else math.nan)


def _value_of(args: List[TaggedValue]) -> TaggedValue:
	if len(args) != 1:
		raise EvaluationError("valueOf() expects 1 argument")
	return text_value(args[0].render())


def _parse_int(args: List[TaggedValue]) -> TaggedValue:
	if len(args) != 1:
		raise EvaluationError("parseInt() expects 1 argument")
	try:
		return int_value(int(args[0].render().strip()))
	except ValueError:
		raise EvaluationError(f'For input string: "{args[0].render()}"')


def _parse_double(args: List[TaggedValue]) -> TaggedValue:
	if len(args) != 1:
		raise EvaluationError("parseDouble() expects 1 argument")
	try:
		return float_value(float(args[0].render().strip()))
	except ValueError:
		raise EvaluationError(f'For input string: "{args[0].render()}"')


def _format(args: List[TaggedValue]) -> TaggedValue:
	if not args or args[0].tag != ValueTag.TEXT:
		raise EvaluationError("format() expects a format string")
	return text_value(java_format(args[0].value, args[1:]))


BUILTINS: Dict[str, Callable[[List[TaggedValue]], TaggedValue]] = {
	"add": _fold("+"),
	"subtract": _fold("-"),
	"multiply": _fold("*"),
	"divide": _fold("/"),
	"max": _extreme(max),
	"min": _extreme(min),
	"abs": _abs,
	"pow": _pow,
	"sqrt": _sqrt,
	"Math.max": _extreme(max),
	"Math.min": _extreme(min),
	"Math.abs": _abs,
	"Math.pow": _pow,
	"Math.sqrt": _sqrt,
	"String.valueOf": _value_of,
	"String.format": _format,
	"Integer.parseInt": _parse_int,
	"Double.parseDouble": _parse_double,
}


def call_builtin(name: str, args: List[TaggedValue]) -> TaggedValue:
	builtin = BUILTINS.get(name)
	if builtin is None:
		raise EvaluationError(f"unknown method '{name}'")
	return builtin(args)


# ---------------------------------------------------------------------------
# Restricted arithmetic evaluator


_ARITHMETIC_TOKENS = {
	TokenKind.NUMBER,
	TokenKind.CHAR_CONST,
	TokenKind.IDENT,
	TokenKind.DOT,
	TokenKind.COMMA,
	TokenKind.PLUS,
	TokenKind.MINUS,
	TokenKind.STAR,
	TokenKind.SLASH,
	TokenKind.PERCENT,
	TokenKind.LPAREN,
	TokenKind.RPAREN,
	TokenKind.EOF,
}

_CAST_TYPES = {"int", "long", "short", "byte", "double", "float", "char"}

_OPERATOR_SYMBOLS = {
	TokenKind.PLUS: "+",
	TokenKind.MINUS: "-",
	TokenKind.STAR: "*",
	TokenKind.SLASH: "/",
	TokenKind.PERCENT: "%",
}


class ArithmeticParser:
	"""Recursive-descent evaluator over a closed grammar.

	expr    := term (('+' | '-') term)*
	term    := unary (('*' | '/' | '%') unary)*
	unary   := ('-' | '+') unary | '(' type ')' unary | primary
	primary := NUMBER | CHAR | name ['(' args ')'] | '(' expr ')'

	Names resolve against the environment; anything outside the grammar is rejected.
	"""

	def __init__(self, text: str, environment: Environment) -> None:
		self.text = text
		self.environment = environment
		self.tokens = Lexer(text).tokenize()
		self.index = 0
		for token in self.tokens:
			if token.kind not in _ARITHMETIC_TOKENS:
				raise EvaluationError(f"unexpected '{token.lexeme}' in arithmetic expression")

	def evaluate(self) -> TaggedValue:
		value = self._parse_expression()
		if not self._check(TokenKind.EOF):
			raise EvaluationError(f"unexpected '{self._peek().lexeme}'")
		return value

	def _parse_expression(self) -> TaggedValue:
		value = self._parse_term()
		while self._check(TokenKind.PLUS) or self._check(TokenKind.MINUS):
			operator = self._advance()
			right = self._parse_term()
			value = apply_operator(_OPERATOR_SYMBOLS[operator.kind], value, right)
		return value

	def _parse_term(self) -> TaggedValue:
		value = self._parse_unary()
		while self._check(TokenKind.STAR) or self._check(TokenKind.SLASH) or self._check(TokenKind.PERCENT):
			operator = self._advance()
			right = self._parse_unary()
			value = apply_operator(_OPERATOR_SYMBOLS[operator.kind], value, right)
		return value

	def _parse_unary(self) -> TaggedValue:
		if self._match(TokenKind.MINUS):
			operand = self._parse_unary()
			return apply_operator("-", int_value(0), operand) if operand.is_integral else float_value(-operand.as_number())
		if self._match(TokenKind.PLUS):
			operand = self._parse_unary()
			operand.as_number()
			return operand
		if self._is_cast():
			type_name = self.tokens[self.index + 1].lexeme
			self.index += 3
			operand = self._parse_unary()
			if type_name == "char":
				return TaggedValue(ValueTag.CHAR, to_char(operand.as_number()))
			return coerce(operand, ValueTag.FLOAT if type_name in ("double", "float") else ValueTag.INT)
		return self._parse_primary()

	def _parse_primary(self) -> TaggedValue:
		token = self._advance()
		if token.kind == TokenKind.NUMBER:
			return float_value(token.value) if isinstance(token.value, float) else int_value(token.value)
		if token.kind == TokenKind.CHAR_CONST:
			return TaggedValue(ValueTag.CHAR, token.value)
		if token.kind == TokenKind.LPAREN:
			value = self._parse_expression()
			self._expect(TokenKind.RPAREN)
			return value
		if token.kind == TokenKind.IDENT:
			name = token.lexeme
			while self._check(TokenKind.DOT):
				self._advance()
				part = self._expect(TokenKind.IDENT)
				name += "." + part.lexeme
			if self._match(TokenKind.LPAREN):
				args: List[TaggedValue] = []
				if not self._check(TokenKind.RPAREN):
					args.append(self._parse_expression())
					while self._match(TokenKind.COMMA):
						args.append(self._parse_expression())
				self._expect(TokenKind.RPAREN)
				return call_builtin(name, args)
			return self._resolve(name)
		raise EvaluationError(f"unexpected '{token.lexeme or 'end of expression'}'")

	def _resolve(self, name: str) -> TaggedValue:
		value = self.environment.lookup(name)
		if value is not None:
			return value
		if name in ("true", "false"):
			return bool_value(name == "true")
		raise EvaluationError(f"cannot find symbol '{name}'")

	def _is_cast(self) -> bool:
		if not self._check(TokenKind.LPAREN):
			return False
		if self.index + 2 >= len(self.tokens):
			return False
		name = self.tokens[self.index + 1]
		return name.kind == TokenKind.IDENT and name.lexeme in _CAST_TYPES and self.tokens[self.index + 2].kind == TokenKind.RPAREN

	# Utility helpers ---------------------------------------------------------

	def _peek(self) -> Token:
		return self.tokens[self.index]

	def _check(self, kind: TokenKind) -> bool:
		return self.tokens[self.index].kind == kind

	def _match(self, kind: TokenKind) -> bool:
		if self._check(kind):
			self.index += 1
			return True
		return False

	def _advance(self) -> Token:
		token = self.tokens[self.index]
		if token.kind != TokenKind.EOF:
			self.index += 1
		return token

	def _expect(self, kind: TokenKind) -> Token:
		if not self._check(kind):
			raise EvaluationError(f"expected {kind.name.lower()} but found '{self._peek().lexeme or 'end of expression'}'")
		return self._advance()


# ---------------------------------------------------------------------------
# Expression evaluator


class ExpressionKind(Enum):
	EMPTY = auto()
	STRING = auto()
	CHAR = auto()
	BOOLEAN = auto()
	INTEGER = auto()
	FLOAT = auto()
	ARITHMETIC = auto()
	IDENTIFIER = auto()
	CALL = auto()
	CONCATENATION = auto()


_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")
_FLOAT_RE = re.compile(r"^(?:\d+\.\d+[fFdD]?|\d+[fFdD])$")
_CALL_RE = re.compile(r"^[A-Za-z_$][\w$]*(?:\s*\.\s*[A-Za-z_$][\w$]*)*\s*\(")
_ARITHMETIC_CHARS = set("+-*/%")


def unwrap_parens(text: str) -> str:
	text = text.strip()
	while text.startswith("(") and find_closing(text, 0) == len(text) - 1:
		text = text[1:-1].strip()
	return text


class ExpressionEvaluator:
	def __init__(self, environment: Environment) -> None:
		self.environment = environment

	def classify(self, expression: str) -> ExpressionKind:
		text = unwrap_parens(expression)
		if not text:
			return ExpressionKind.EMPTY
		tokens = [t for t in Lexer(text).tokenize() if t.kind != TokenKind.EOF]
		if len(tokens) == 1 and tokens[0].kind == TokenKind.STRING:
			return ExpressionKind.STRING
		if len(tokens) == 1 and tokens[0].kind == TokenKind.CHAR_CONST:
			return ExpressionKind.CHAR
		if text in ("true", "false"):
			return ExpressionKind.BOOLEAN
		if text.isascii() and text.isdigit():
			return ExpressionKind.INTEGER
		if _FLOAT_RE.match(text):
			return ExpressionKind.FLOAT
		if self._is_arithmetic(text, tokens):
			return ExpressionKind.ARITHMETIC
		if _IDENTIFIER_RE.match(text):
			return ExpressionKind.IDENTIFIER
		match = _CALL_RE.match(text)
		if match and find_closing(text, match.end() - 1) == len(text) - 1:
			return ExpressionKind.CALL
		return ExpressionKind.CONCATENATION

	def _is_arithmetic(self, text: str, tokens: List[Token]) -> bool:
		mask = literal_mask(text)
		is_cast = (
			len(tokens) > 3
			and tokens[0].kind == TokenKind.LPAREN
			and tokens[1].lexeme in _CAST_TYPES
			and tokens[2].kind == TokenKind.RPAREN
		)
		if not is_cast and not any(ch in _ARITHMETIC_CHARS and not quoted for ch, quoted in zip(text, mask)):
			return False
		for token in tokens:
			if token.kind == TokenKind.STRING:
				return False
			if token.kind == TokenKind.IDENT:
				value = self.environment.lookup(token.lexeme)
				if value is not None and value.tag == ValueTag.TEXT:
					return False
		return True

	def evaluate(self, expression: str) -> TaggedValue:
		text = unwrap_parens(expression)
		kind = self.classify(text)
		if kind == ExpressionKind.EMPTY:
			raise EvaluationError("empty expression")
		if kind == ExpressionKind.STRING or kind == ExpressionKind.CHAR:
			token = Lexer(text).tokenize()[0]
			tag = ValueTag.TEXT if kind == ExpressionKind.STRING else ValueTag.CHAR
			return TaggedValue(tag, token.value)
		if kind == ExpressionKind.BOOLEAN:
			return bool_value(text == "true")
		if kind == ExpressionKind.INTEGER:
			return int_value(int(text))
		if kind == ExpressionKind.FLOAT:
			return float_value(float(text.rstrip("fFdD")))
		if kind == ExpressionKind.ARITHMETIC:
			return ArithmeticParser(text, self.environment).evaluate()
		if kind == ExpressionKind.IDENTIFIER:
			value = self.environment.lookup(text)
			if value is None:
				# Undeclared names evaluate to their own text instead of failing.
				logger.debug("identifier %r is not declared, using its text", text)
				return text_value(text)
			return value
		if kind == ExpressionKind.CALL:
			return self._evaluate_call(text)
		return self._evaluate_concatenation(text)

	def _evaluate_call(self, text: str) -> TaggedValue:
		open_index = text.index("(")
		name = re.sub(r"\s+", "", text[:open_index])
		inner = text[open_index + 1:-1].strip()
		args = [self.evaluate(part) for part in split_top_level(inner, ",")] if inner else []
		return call_builtin(name, args)

	def _evaluate_concatenation(self, text: str) -> TaggedValue:
		parts = split_top_level(text, "+")
		if len(parts) < 2:
			raise EvaluationError(f"cannot evaluate '{text}'")
		result: Optional[TaggedValue] = None
		for part in parts:
			if not part.strip():
				raise EvaluationError(f"missing operand in '{text}'")
			value = self.evaluate(part)
			result = value if result is None else apply_operator("+", result, value)
		return result


# ---------------------------------------------------------------------------
# Condition evaluator


COMPARATORS = ("==", "!=", "<=", ">=", "<", ">")


def _find_comparator(text: str) -> Optional[tuple]:
	mask = literal_mask(text)
	depth = 0
	i = 0
	while i < len(text):
		ch = text[i]
		if mask[i]:
			i += 1
			continue
		if ch in "([{":
			depth += 1
		elif ch in ")]}":
			depth -= 1
		elif depth == 0:
			for comparator in COMPARATORS:
				if text.startswith(comparator, i):
					return i, comparator
		i += 1
	return None


class ConditionEvaluator:
	"""Evaluates a single top-level comparison. `&&` and `||` are rejected."""

	def __init__(self, expressions: ExpressionEvaluator) -> None:
		self.expressions = expressions

	def evaluate(self, condition: str) -> bool:
		text = unwrap_parens(condition)
		if not text:
			raise EvaluationError("empty condition")
		if self._has_logical_operator(text):
			raise UnsupportedConditionError(f"compound conditions are not supported: {text}")
		found = _find_comparator(text)
		if found is None:
			if text.startswith("!"):
				return not self.evaluate(text[1:])
			return self._truth(self.expressions.evaluate(text), text)
		index, comparator = found
		left = self.expressions.evaluate(text[:index])
		right = self.expressions.evaluate(text[index + len(comparator):])
		return self._compare(comparator, left, right)

	def _has_logical_operator(self, text: str) -> bool:
		mask = literal_mask(text)
		stripped = "".join(ch for ch, quoted in zip(text, mask) if not quoted)
		return "&&" in stripped or "||" in stripped

	def _compare(self, comparator: str, left: TaggedValue, right: TaggedValue) -> bool:
		if comparator in ("==", "!="):
			# Equality is textual: 5.0 and 5 render differently and are not equal.
			equal = left.render() == right.render()
			return equal if comparator == "==" else not equal
		a = self._as_float(left)
		b = self._as_float(right)
		if comparator == "<":
			return a < b
		if comparator == ">":
			return a > b
		if comparator == "<=":
			return a <= b
		return a >= b

	def _as_float(self, value: TaggedValue) -> float:
		if value.is_numeric:
			return float(value.as_number())
		try:
			return float(value.render())
		except ValueError:
			raise EvaluationError(f"bad operand '{value.render()}' for comparison")

	def _truth(self, value: TaggedValue, text: str) -> bool:
		if value.tag == ValueTag.BOOL:
			return value.value
		if value.tag in (ValueTag.INT, ValueTag.FLOAT):
			return value.value != 0
		raise EvaluationError(f"incompatible types: '{text}' cannot be converted to boolean")
