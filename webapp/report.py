from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from quickjava import Diagnostic, Severity

RULE = "═" * 40
THIN_RULE = "─" * 32


class RunStatus(Enum):
	OK = "ok"
	FAILED = "failed"
	BUSY = "busy"


@dataclass(frozen=True)
class RunStats:
	lines: int = 0
	prints: int = 0
	open_braces: int = 0
	close_braces: int = 0
	variables: int = 0

	def to_dict(self) -> Dict[str, int]:
		return {
			"lines": self.lines,
			"prints": self.prints,
			"openBraces": self.open_braces,
			"closeBraces": self.close_braces,
			"variables": self.variables,
		}


@dataclass
class ExecutionResult:
	success: bool
	status: RunStatus
	diagnostics: List[Diagnostic] = field(default_factory=list)
	output: List[str] = field(default_factory=list)
	stats: RunStats = field(default_factory=RunStats)
	compiled: bool = True
	report: str = ""

	@property
	def errors(self) -> List[Diagnostic]:
		return [d for d in self.diagnostics if d.severity == Severity.ERROR]

	@property
	def warnings(self) -> List[Diagnostic]:
		return [d for d in self.diagnostics if d.severity == Severity.WARNING]

	def to_dict(self) -> Dict[str, Any]:
		return {
			"success": self.success,
			"status": self.status.value,
			"diagnostics": [d.to_dict() for d in self.diagnostics],
			"output": list(self.output),
			"stats": self.stats.to_dict(),
			"compiled": self.compiled,
			"report": self.report,
		}


def _bullets(diagnostics: List[Diagnostic]) -> str:
	items = []
	for d in diagnostics:
		where = f" (line {d.line})" if d.line is not None else ""
		items.append(f"  • {d.message}{where}")
	return "\n".join(items)


def _footer(stats: RunStats, status: str) -> List[str]:
	return [
		"📊 Execution Summary:",
		THIN_RULE,
		f"• Total lines: {stats.lines}",
		f"• Print statements: {stats.prints}",
		f"• Open braces: {{{stats.open_braces}",
		f"• Close braces: }}{stats.close_braces}",
		f"• Variables: {stats.variables}",
		f"• Status: {status}",
	]


def build_report(result: ExecutionResult) -> str:
	"""Render an Execution Result as the text shown in the output panel.

	Sections come in a fixed order (banner, program output, errors, warnings, summary)
	and nothing time-dependent is included, so identical runs render identically.
	"""
	if result.status == RunStatus.BUSY:
		return "🔄 Already compiling... Please wait."

	if not result.compiled:
		parts = [
			"❌ Compilation Failed!",
			RULE,
			"",
			"Errors:",
			_bullets(result.errors),
			"",
			f"Line count: {result.stats.lines}",
			f"Print statements: {result.stats.prints}",
		]
		if result.warnings:
			parts += ["", "Warnings:", _bullets(result.warnings)]
		parts += ["", "💡 Fix the errors and try again."]
		return "\n".join(parts)

	parts = ["✅ Compilation Successful!" if result.success else "❌ Execution Failed!", RULE, ""]
	if result.output:
		parts += ["📤 Program Output:", THIN_RULE, "\n".join(result.output), ""]
	elif result.success:
		parts += ["📤 No output generated.", "The program ran successfully but didn't produce any output.", ""]
	else:
		parts += ["📤 No output generated.", ""]
	if result.errors:
		parts += ["❌ Errors:", THIN_RULE, _bullets(result.errors), ""]
	if result.warnings:
		parts += ["⚠️ Warnings:", THIN_RULE, _bullets(result.warnings), ""]
	parts += _footer(result.stats, "Successfully executed" if result.success else "Terminated")
	return "\n".join(parts)
