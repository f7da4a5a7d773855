from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional

from quickjava import (
	CompilationArtifacts,
	Diagnostic,
	DiagnosticEngine,
	QuickJavaEngine,
	Severity,
	Statement,
	StatementKind,
	classify_statement,
	count_braces,
	split_top_level,
)
from webapp.blocks import BlockRange, locate_block, split_inline_else
from webapp.expressions import (
	TYPE_TAGS,
	ConditionEvaluator,
	EvaluationError,
	ExpressionEvaluator,
	Environment,
	UnsupportedConditionError,
	ValueTag,
	apply_operator,
	int_value,
	java_format,
)
from webapp.report import ExecutionResult, RunStats, RunStatus, build_report

logger = logging.getLogger("quickjava.interpreter")


# ---------------------------------------------------------------------------
# Configuration


def _env_bool(value: str) -> bool:
	return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class SimulationConfig:
	max_iterations: int = 10_000
	compile_delay_ms: int = 0
	print_only_bodies: bool = False
	entry_class: str = "Main"

	@classmethod
	def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SimulationConfig":
		env = os.environ if environ is None else environ
		defaults = cls()
		return cls(
			max_iterations=int(env.get("QUICKJAVA_MAX_ITERATIONS", defaults.max_iterations)),
			compile_delay_ms=int(env.get("QUICKJAVA_COMPILE_DELAY_MS", defaults.compile_delay_ms)),
			print_only_bodies=_env_bool(env.get("QUICKJAVA_PRINT_ONLY_BODIES", "false")),
			entry_class=env.get("QUICKJAVA_ENTRY_CLASS", defaults.entry_class),
		)


# ---------------------------------------------------------------------------
# Runtime errors and control signals


class RuntimeIssue(Exception):
	def __init__(self, message: str, line: Optional[int] = None) -> None:
		super().__init__(message)
		self.message = message
		self.line = line

	def __str__(self) -> str:
		return self.message


class IterationLimitExceeded(RuntimeIssue):
	def __init__(self, limit: int, line: Optional[int] = None) -> None:
		where = f" at line {line}" if line is not None else ""
		super().__init__(f"Iteration limit exceeded ({limit} iterations){where}. Possible infinite loop.", line)
		self.limit = limit


class _ReturnSignal(Exception):
	pass


class _BreakSignal(Exception):
	pass


class _ContinueSignal(Exception):
	pass


# ---------------------------------------------------------------------------
# Output sink


class OutputSink:
	"""Simulated stdout. `print` text stays pending until a newline completes the record."""

	def __init__(self) -> None:
		self._records: List[str] = []
		self._pending = ""

	@property
	def records(self) -> List[str]:
		return self._records

	def write(self, text: str) -> None:
		pieces = (self._pending + text).split("\n")
		self._records.extend(pieces[:-1])
		self._pending = pieces[-1]

	def writeln(self, text: str = "") -> None:
		self.write(text + "\n")

	def flush(self) -> None:
		if self._pending:
			self._records.append(self._pending)
			self._pending = ""


# ---------------------------------------------------------------------------
# Session


class Session:
	"""One run over checked source: owns its environment, output sink and runtime diagnostics.

	Statements are dispatched line by line. Control-flow headers locate their bodies with
	`locate_block` and recurse into them; everything else is a one-line statement.
	"""

	def __init__(self, artifacts: CompilationArtifacts, config: SimulationConfig) -> None:
		self.lines = artifacts.lines
		self.statements = artifacts.statements
		self.config = config
		self.environment = Environment()
		self.output = OutputSink()
		self.diagnostics = DiagnosticEngine()
		self.expressions = ExpressionEvaluator(self.environment)
		self.conditions = ConditionEvaluator(self.expressions)
		self.iterations = 0

	def run(self) -> None:
		try:
			self._execute_range(0, len(self.lines))
		except _ReturnSignal:
			logger.debug("main returned")
		except (_BreakSignal, _ContinueSignal):
			logger.debug("break/continue outside of a loop ignored")
		finally:
			self.output.flush()

	def _tick(self, line: Optional[int]) -> None:
		self.iterations += 1
		if self.iterations > self.config.max_iterations:
			raise IterationLimitExceeded(self.config.max_iterations, line)

	def _line_number(self, index: int) -> Optional[int]:
		if 0 <= index < len(self.lines):
			return self.lines[index].number
		return None

	# Dispatch ----------------------------------------------------------------

	def _execute_range(self, start: int, end: int) -> None:
		index = start
		while index < end:
			index = self._execute_line(index)

	def _execute_line(self, index: int) -> int:
		stmt = self.statements[index]
		kind = stmt.kind
		line = self._line_number(index)
		if kind == StatementKind.IF:
			return self._execute_if(index)
		if kind == StatementKind.FOR:
			return self._execute_for(index)
		if kind == StatementKind.WHILE:
			return self._execute_while(index)
		if kind == StatementKind.SWITCH:
			return self._execute_switch(index)
		if kind in (StatementKind.FOR_EACH, StatementKind.DO):
			label = "Enhanced for loops" if kind == StatementKind.FOR_EACH else "do-while loops"
			self.diagnostics.report(Severity.WARNING, f"{label} are not supported; body skipped", line)
			return locate_block(self.lines, index, stmt.rest).closing + 1
		if kind == StatementKind.ELSE:
			# Reached only when no if precedes it; skip the orphaned branch.
			self.diagnostics.report(Severity.WARNING, "'else' without 'if'; branch skipped", line)
			return locate_block(self.lines, index, stmt.rest).closing + 1
		if kind == StatementKind.METHOD_HEADER and stmt.name != "main":
			logger.debug("skipping body of method %s at line %s", stmt.name, line)
			return locate_block(self.lines, index).closing + 1
		if kind == StatementKind.CASE:
			if stmt.rest:
				self._execute_inline(stmt.rest, line)
			return index + 1
		self._execute_simple(stmt, line)
		return index + 1

	def _execute_simple(self, stmt: Statement, line: Optional[int]) -> None:
		kind = stmt.kind
		if kind == StatementKind.BREAK:
			raise _BreakSignal()
		if kind == StatementKind.CONTINUE:
			raise _ContinueSignal()
		if kind == StatementKind.RETURN:
			raise _ReturnSignal()
		try:
			if kind == StatementKind.PRINT:
				self._print(stmt)
			elif kind == StatementKind.DECLARATION:
				self._declare(stmt, line)
			elif kind == StatementKind.ASSIGNMENT:
				self._assign(stmt.name or "", stmt.operator or "=", stmt.expression or "")
			elif kind == StatementKind.INCREMENT:
				self._increment(stmt.name or "", stmt.operator or "++")
			elif kind == StatementKind.UNKNOWN:
				logger.debug("line %s: unsupported statement %r skipped", line, stmt.text)
		except EvaluationError as exc:
			self._fault(stmt.expression if stmt.expression else stmt.text, exc, line, newline=stmt.name != "print")

	def _fault(self, expression: str, exc: EvaluationError, line: Optional[int], newline: bool = True) -> None:
		logger.debug("line %s: cannot evaluate %r: %s", line, expression, exc)
		if isinstance(exc, UnsupportedConditionError):
			self.diagnostics.report(
				Severity.WARNING,
				f"Compound conditions (&&, ||) are not supported: {expression}",
				line,
				hint="Split the condition into nested if statements.",
			)
		placeholder = f"[Error evaluating: {expression}]"
		if newline:
			self.output.writeln(placeholder)
		else:
			self.output.write(placeholder)

	def _execute_inline(self, text: str, line: Optional[int], loop_body: bool = False) -> None:
		pieces = split_top_level(text, ";")
		index = 0
		while index < len(pieces):
			piece = pieces[index]
			index += 1
			if not piece.strip():
				continue
			stmt = classify_statement(piece)
			if loop_body and self.config.print_only_bodies and stmt.kind != StatementKind.PRINT:
				continue
			if stmt.kind == StatementKind.IF:
				# `if (c) a; else b;` splits into separate pieces; gather the else chain back.
				chain: List[str] = []
				while index < len(pieces) and classify_statement(pieces[index]).kind == StatementKind.ELSE:
					chain.append(pieces[index])
					index += 1
				else_text = None
				if chain:
					else_text = ";".join([classify_statement(chain[0]).rest or ""] + chain[1:])
				self._execute_inline_if(stmt, else_text, line)
			elif stmt.kind == StatementKind.ELSE:
				self.diagnostics.report(Severity.WARNING, "'else' without 'if'; branch skipped", line)
			elif stmt.kind == StatementKind.WHILE:
				body = self._strip_braces(stmt.rest or "")
				self._run_loop(stmt.expression or "", lambda: self._execute_inline(body, line, loop_body=True), None, line)
			elif stmt.kind == StatementKind.FOR:
				body = self._strip_braces(stmt.rest or "")
				init, condition, step = stmt.parts
				if init:
					self._execute_fragment(init, line)
				self._run_loop(condition, lambda: self._execute_inline(body, line, loop_body=True), step, line)
			elif stmt.kind in (StatementKind.BLOCK_OPEN, StatementKind.BLOCK_CLOSE):
				continue
			else:
				self._execute_simple(stmt, line)

	def _execute_inline_if(self, stmt: Statement, else_text: Optional[str], line: Optional[int]) -> None:
		then_text, inline_else = split_inline_else(stmt.rest or "")
		if inline_else is not None:
			else_text = inline_else
		if self._test(stmt.expression or "", line):
			if then_text:
				self._execute_inline(self._strip_braces(then_text), line)
		elif else_text:
			self._execute_inline(self._strip_braces(else_text), line)

	@staticmethod
	def _strip_braces(text: str) -> str:
		text = text.strip()
		if text.startswith("{") and text.endswith("}"):
			return text[1:-1]
		return text

	def _execute_fragment(self, text: str, line: Optional[int]) -> None:
		for piece in split_top_level(text, ","):
			stmt = classify_statement(piece)
			if stmt.kind == StatementKind.UNKNOWN and self._is_bare_name(piece):
				continue
			self._execute_simple(stmt, line)

	@staticmethod
	def _is_bare_name(text: str) -> bool:
		return text.strip().isidentifier()

	def _run_block(self, block: BlockRange, line: Optional[int], loop_body: bool = False) -> None:
		if block.inline is not None:
			self._execute_inline(block.inline, line, loop_body=loop_body)
			return
		if loop_body and self.config.print_only_bodies:
			for index in range(block.start, block.end):
				stmt = self.statements[index]
				if stmt.kind == StatementKind.PRINT:
					self._execute_simple(stmt, self._line_number(index))
			return
		self._execute_range(block.start, block.end)

	# Simple statements -------------------------------------------------------

	def _print(self, stmt: Statement) -> None:
		argument = stmt.expression or ""
		if stmt.name == "printf":
			args = [self.expressions.evaluate(part) for part in split_top_level(argument, ",")]
			if not args or args[0].tag != ValueTag.TEXT:
				raise EvaluationError("printf expects a format string")
			self.output.write(java_format(args[0].value, args[1:]))
			return
		text = self.expressions.evaluate(argument).render() if argument else ""
		if stmt.name == "println":
			self.output.writeln(text)
		else:
			self.output.write(text)

	def _declare(self, stmt: Statement, line: Optional[int]) -> None:
		type_name = stmt.type_name or ""
		tag = TYPE_TAGS.get(type_name)
		if tag is None and type_name != "var":
			logger.debug("line %s: declarations of type %s are not simulated", line, type_name)
			return
		for name, expression in stmt.declarators:
			try:
				value = self.expressions.evaluate(expression) if expression else None
				if tag is None:
					if value is None:
						raise EvaluationError(f"cannot infer type for local variable {name}")
					self.environment.declare(name, value.tag, value)
				else:
					self.environment.declare(name, tag, value)
			except EvaluationError as exc:
				self._fault(expression or name, exc, line)

	def _assign(self, name: str, operator: str, expression: str) -> None:
		value = self.expressions.evaluate(expression)
		if operator != "=":
			current = self.environment.lookup(name)
			if current is None:
				raise EvaluationError(f"cannot find symbol '{name}'")
			value = apply_operator(operator[0], current, value)
		self.environment.assign(name, value)

	def _increment(self, name: str, operator: str) -> None:
		current = self.environment.lookup(name)
		if current is None:
			raise EvaluationError(f"cannot find symbol '{name}'")
		self.environment.assign(name, apply_operator(operator[0], current, int_value(1)))

	# Control flow ------------------------------------------------------------

	def _test(self, condition: str, line: Optional[int]) -> bool:
		if not condition.strip():
			return True
		try:
			return self.conditions.evaluate(condition)
		except EvaluationError as exc:
			self._fault(condition, exc, line)
			return False

	def _run_loop(self, condition: str, run_body: Callable[[], None], step: Optional[str], line: Optional[int]) -> None:
		while self._test(condition, line):
			self._tick(line)
			try:
				run_body()
			except _BreakSignal:
				break
			except _ContinueSignal:
				pass
			if step:
				self._execute_fragment(step, line)

	def _find_else(self, block: BlockRange, header_index: int) -> Optional[int]:
		closing = block.closing
		if closing >= len(self.lines):
			return None
		if closing != header_index and not block.is_inline and self.statements[closing].kind == StatementKind.ELSE:
			return closing
		for index in range(closing + 1, len(self.lines)):
			if not self.lines[index].is_code:
				continue
			# `} else` closes an enclosing body first, so that else belongs to an outer if.
			if self.statements[index].kind == StatementKind.ELSE and self.lines[index].text.startswith("else"):
				return index
			return None
		return None

	def _execute_if(self, index: int) -> int:
		stmt = self.statements[index]
		header = index
		condition: Optional[str] = stmt.expression or ""
		rest = stmt.rest
		taken = False
		while True:
			line = self._line_number(header)
			same_line_else = None
			if rest:
				rest, same_line_else = split_inline_else(rest)
			block = locate_block(self.lines, header, rest)
			if not taken and (condition is None or self._test(condition, line)):
				taken = True
				self._run_block(block, line)
			if same_line_else is not None:
				branch = classify_statement(same_line_else)
				if branch.kind == StatementKind.IF:
					condition, rest = branch.expression or "", branch.rest
				else:
					condition, rest = None, same_line_else
				continue
			else_index = self._find_else(block, header)
			if else_index is None:
				return block.closing + 1
			branch = classify_statement(self.statements[else_index].rest or "")
			if branch.kind == StatementKind.IF:
				condition, rest = branch.expression or "", branch.rest
			else:
				condition, rest = None, self.statements[else_index].rest
			header = else_index

	def _execute_for(self, index: int) -> int:
		stmt = self.statements[index]
		line = self._line_number(index)
		block = locate_block(self.lines, index, stmt.rest)
		init, condition, step = stmt.parts
		if init:
			self._execute_fragment(init, line)
		self._run_loop(condition, lambda: self._run_block(block, line, loop_body=True), step, line)
		return block.closing + 1

	def _execute_while(self, index: int) -> int:
		stmt = self.statements[index]
		line = self._line_number(index)
		if (stmt.rest or "").startswith(";"):
			logger.debug("line %s: empty while body skipped", line)
			return index + 1
		block = locate_block(self.lines, index, stmt.rest)
		self._run_loop(stmt.expression or "", lambda: self._run_block(block, line, loop_body=True), None, line)
		return block.closing + 1

	def _execute_switch(self, index: int) -> int:
		stmt = self.statements[index]
		line = self._line_number(index)
		block = locate_block(self.lines, index, stmt.rest)
		if block.is_inline:
			self.diagnostics.report(Severity.WARNING, "single-line switch statements are not supported", line)
			return block.closing + 1
		try:
			subject = self.expressions.evaluate(stmt.expression or "")
		except EvaluationError as exc:
			self._fault(stmt.expression or "", exc, line)
			return block.closing + 1

		target: Optional[int] = None
		default: Optional[int] = None
		depth = 0
		for label_index in range(block.start, block.end):
			label = self.statements[label_index]
			if depth == 0 and label.kind == StatementKind.CASE:
				if label.name == "default":
					default = label_index
				elif target is None and self._case_matches(subject, label, self._line_number(label_index)):
					target = label_index
			if self.lines[label_index].is_code:
				opens, closes = count_braces(self.lines[label_index].text)
				depth += opens - closes
		start = target if target is not None else default
		if start is not None:
			try:
				self._execute_range(start, block.end)
			except _BreakSignal:
				pass
		return block.closing + 1

	def _case_matches(self, subject, label: Statement, line: Optional[int]) -> bool:
		try:
			value = self.expressions.evaluate(label.expression or "")
		except EvaluationError as exc:
			self._fault(label.expression or "", exc, line)
			return False
		if subject.is_numeric and value.is_numeric:
			return subject.as_number() == value.as_number()
		return subject.render() == value.render()


# ---------------------------------------------------------------------------
# Entry point


_busy = False
_busy_lock = threading.Lock()


def is_busy() -> bool:
	return _busy


def interpret(source: str, config: Optional[SimulationConfig] = None) -> ExecutionResult:
	"""Check and simulate `source`, returning the complete Execution Result.

	Only one run may be in progress per process; an overlapping call is rejected with a
	`RunStatus.BUSY` result instead of being queued. No exception escapes this function.
	"""
	global _busy
	with _busy_lock:
		if _busy:
			logger.warning("rejected run: another run is still in progress")
			result = ExecutionResult(
				success=False,
				status=RunStatus.BUSY,
				diagnostics=[Diagnostic(Severity.WARNING, "Already compiling... Please wait.")],
			)
			result.report = build_report(result)
			return result
		_busy = True
	try:
		return _interpret(source, config or SimulationConfig())
	finally:
		with _busy_lock:
			_busy = False


def _interpret(source: str, config: SimulationConfig) -> ExecutionResult:
	try:
		result = _simulate(source, config)
	except Exception as exc:
		logger.exception("unexpected failure while interpreting")
		lines = len(source.replace("\r\n", "\n").strip().split("\n"))
		result = ExecutionResult(
			success=False,
			status=RunStatus.FAILED,
			diagnostics=[Diagnostic(Severity.ERROR, f"Unexpected Error: {exc}")],
			stats=RunStats(lines=lines),
		)
	result.report = build_report(result)
	if config.compile_delay_ms > 0:
		time.sleep(config.compile_delay_ms / 1000)
	return result


def _simulate(source: str, config: SimulationConfig) -> ExecutionResult:
	artifacts = QuickJavaEngine(entry_class=config.entry_class).compile(source)
	structure = artifacts.structure
	stats = RunStats(
		lines=structure.line_count,
		prints=structure.print_count,
		open_braces=structure.open_braces,
		close_braces=structure.close_braces,
	)
	if artifacts.has_errors:
		logger.info("compilation failed with %d diagnostic(s)", len(artifacts.diagnostics))
		return ExecutionResult(
			success=False,
			status=RunStatus.FAILED,
			diagnostics=list(artifacts.diagnostics),
			stats=stats,
			compiled=False,
		)

	session = Session(artifacts, config)
	logger.info("running %d lines", len(artifacts.lines))
	try:
		session.run()
	except IterationLimitExceeded as issue:
		logger.info("run stopped: %s", issue)
		session.diagnostics.report(Severity.ERROR, issue.message, issue.line)
	diagnostics = list(artifacts.diagnostics) + session.diagnostics.items
	success = not any(d.severity == Severity.ERROR for d in diagnostics)
	return ExecutionResult(
		success=success,
		status=RunStatus.OK if success else RunStatus.FAILED,
		diagnostics=diagnostics,
		output=list(session.output.records),
		stats=RunStats(
			lines=stats.lines,
			prints=stats.prints,
			open_braces=stats.open_braces,
			close_braces=stats.close_braces,
			variables=len(session.environment),
		),
	)
