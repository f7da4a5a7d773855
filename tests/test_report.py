from quickjava import Diagnostic, Severity
from webapp.interpreter import SimulationConfig, interpret
from webapp.report import RULE, THIN_RULE, ExecutionResult, RunStats, RunStatus, build_report


def test_successful_run_report(program):
	result = interpret(program('System.out.println("Hello");'))
	assert result.report == "\n".join([
		"✅ Compilation Successful!",
		RULE,
		"",
		"📤 Program Output:",
		THIN_RULE,
		"Hello",
		"",
		"📊 Execution Summary:",
		THIN_RULE,
		"• Total lines: 5",
		"• Print statements: 1",
		"• Open braces: {2",
		"• Close braces: }2",
		"• Variables: 0",
		"• Status: Successfully executed",
	])


def test_compilation_failure_report():
	result = interpret('System.out.println("hi");')
	lines = result.report.splitlines()
	assert lines[0] == "❌ Compilation Failed!"
	assert '  • Missing "public class" declaration' in lines
	assert "Line count: 1" in lines
	assert "Print statements: 1" in lines
	assert lines[-1] == "💡 Fix the errors and try again."


def test_no_output_placeholder(program):
	report = interpret(program("int x = 1;")).report
	assert "📤 No output generated." in report
	assert "The program ran successfully but didn't produce any output." in report
	assert "• Variables: 1" in report


def test_warnings_section_carries_line_numbers(program):
	result = interpret(program("if (1 > 0 || 2 > 3) {", "}"))
	assert "⚠️ Warnings:" in result.report
	assert "(line 3)" in result.report


def test_terminated_status_after_iteration_limit(program):
	result = interpret(program("while (true) {", "}"), SimulationConfig(max_iterations=2))
	assert result.report.startswith("❌ Execution Failed!")
	assert "❌ Errors:" in result.report
	assert result.report.endswith("• Status: Terminated")


def test_to_dict_uses_wire_names():
	result = ExecutionResult(
		success=True,
		status=RunStatus.OK,
		diagnostics=[Diagnostic(Severity.WARNING, "careful", 2)],
		output=["a"],
		stats=RunStats(lines=3, prints=1, open_braces=2, close_braces=2, variables=1),
	)
	result.report = build_report(result)
	data = result.to_dict()
	assert data["status"] == "ok"
	assert data["stats"] == {"lines": 3, "prints": 1, "openBraces": 2, "closeBraces": 2, "variables": 1}
	assert data["diagnostics"] == [{"severity": "WARNING", "message": "careful", "line": 2, "hint": None}]
	assert data["compiled"] is True
	assert data["report"] == result.report
