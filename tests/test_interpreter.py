import pytest

from quickjava import Severity
from webapp import interpreter
from webapp.examples import EXAMPLES
from webapp.interpreter import OutputSink, SimulationConfig, interpret
from webapp.report import RunStatus


def _output(source, **config):
	result = interpret(source, SimulationConfig(**config))
	assert result.success, [d.message for d in result.diagnostics]
	return result.output


# ---------------------------------------------------------------------------
# Core properties


def test_hello_world(program):
	result = interpret(program('System.out.println("Hello");'))
	assert result.success
	assert result.status == RunStatus.OK
	assert result.output == ["Hello"]
	assert result.diagnostics == []


def test_for_loop_counts_in_order(program):
	source = program("for(int i = 1; i <= 3; i++) {", "    System.out.println(i);", "}")
	assert _output(source) == ["1", "2", "3"]


def test_extra_open_brace_short_circuits(program):
	result = interpret(program("if (true) {", 'System.out.println("never");'))
	assert not result.success
	assert not result.compiled
	assert result.output == []
	assert [d.message for d in result.errors] == ["Unbalanced braces: {3 vs }2"]
	assert result.stats.open_braces == 3
	assert result.stats.close_braces == 2
	assert result.stats.prints == 1


def test_missing_main_is_reported():
	result = interpret('public class Main {\n    System.out.println("x");\n}')
	assert not result.success
	assert "Missing main method: public static void main(String[] args)" in [d.message for d in result.errors]


def test_minimal_main_shorthand_is_rejected():
	result = interpret('class Main { main { System.out.println("Hello"); } }')
	assert not result.success
	assert result.output == []
	assert "Missing main method: public static void main(String[] args)" in [d.message for d in result.errors]


def test_identical_runs_give_identical_results(program):
	source = EXAMPLES["default"]
	assert interpret(source).to_dict() == interpret(source).to_dict()


def test_declared_variable_prints_its_value(program):
	assert _output(program("int x = 5;", "System.out.println(x);")) == ["5"]


def test_undeclared_identifier_prints_its_name(program):
	assert _output(program("System.out.println(x);", "int x = 5;")) == ["x"]


def test_class_name_mismatch_still_runs():
	source = 'public class Demo {\n    public static void main(String[] args) {\n        System.out.println("ok");\n    }\n}'
	result = interpret(source)
	assert result.success
	assert result.output == ["ok"]
	assert [d.severity for d in result.diagnostics] == [Severity.WARNING]


def test_empty_source():
	result = interpret("")
	assert not result.success
	assert [d.message for d in result.errors] == ["No code to execute!"]


# ---------------------------------------------------------------------------
# Iteration cap and busy flag


def test_iteration_cap_stops_infinite_loop(program):
	source = program("int n = 0;", "while (n >= 0) {", "    System.out.println(n);", "    n++;", "}")
	result = interpret(source, SimulationConfig(max_iterations=3))
	assert not result.success
	assert result.status == RunStatus.FAILED
	assert result.output == ["0", "1", "2"]
	(error,) = result.errors
	assert error.message == "Iteration limit exceeded (3 iterations) at line 4. Possible infinite loop."
	assert error.line == 4


def test_iteration_cap_counts_nested_loops_together(program):
	source = program(
		"for (int i = 0; i < 3; i++) {",
		"    for (int j = 0; j < 3; j++) {",
		"        System.out.print(j);",
		"    }",
		"}",
	)
	assert not interpret(source, SimulationConfig(max_iterations=10)).success
	assert interpret(source, SimulationConfig(max_iterations=12)).success


def test_overlapping_run_is_rejected(program, monkeypatch):
	monkeypatch.setattr(interpreter, "_busy", True)
	result = interpret(program('System.out.println("hi");'))
	assert result.status == RunStatus.BUSY
	assert not result.success
	assert result.output == []
	assert [d.message for d in result.warnings] == ["Already compiling... Please wait."]
	assert result.report == "🔄 Already compiling... Please wait."


def test_busy_flag_is_released_after_a_run(program):
	interpret(program("for (;;) {", "}"), SimulationConfig(max_iterations=5))
	assert not interpreter.is_busy()


def test_cosmetic_delay_sleeps_after_the_run(program, monkeypatch):
	calls = []
	monkeypatch.setattr(interpreter.time, "sleep", calls.append)
	interpret(program('System.out.println("hi");'), SimulationConfig(compile_delay_ms=250))
	assert calls == [0.25]


def test_unexpected_failure_becomes_a_result(program, monkeypatch):
	def boom(self):
		raise RuntimeError("boom")

	monkeypatch.setattr(interpreter.Session, "run", boom)
	result = interpret(program('System.out.println("hi");'))
	assert not result.success
	assert [d.message for d in result.errors] == ["Unexpected Error: boom"]
	assert "Execution Failed" in result.report
	assert not interpreter.is_busy()


# ---------------------------------------------------------------------------
# Statements and control flow


def test_print_joins_pending_text_until_println(program):
	source = program(
		'System.out.print("a");',
		'System.out.print("b");',
		"System.out.println();",
		'System.out.print("tail");',
	)
	assert _output(source) == ["ab", "tail"]


def test_embedded_newlines_split_records(program):
	assert _output(program('System.out.println("\\nTitle");')) == ["", "Title"]


def test_printf_and_string_format(program):
	source = program(
		'System.out.printf("%d items%n", 3);',
		'System.out.println(String.format("%.2f", 2.0 / 3));',
	)
	assert _output(source) == ["3 items", "0.67"]


def test_declared_types_coerce_values(program):
	source = program(
		"double d = 15;",
		"int n = 7 / 2;",
		"char c = 'A';",
		"c++;",
		"String s = \"n=\" + n;",
		"System.out.println(d);",
		"System.out.println(s);",
		"System.out.println(c);",
	)
	assert _output(source) == ["15.0", "n=3", "B"]


def test_compound_assignment_operators(program):
	source = program("int t = 10;", "t += 5;", "t -= 3;", "t *= 2;", "t /= 5;", "t %= 3;", "System.out.println(t);")
	assert _output(source) == ["1"]


def test_evaluation_fault_is_replaced_inline(program):
	result = interpret(program("int z = 5 / 0;", 'System.out.println("next");'))
	assert result.success
	assert result.output == ["[Error evaluating: 5 / 0]", "next"]


def test_char_cast_of_negative_number_keeps_running(program):
	source = program(
		'System.out.println("before");',
		"char c = (char) -1;",
		"System.out.println((int) c);",
		'System.out.println("after");',
	)
	assert _output(source) == ["before", "65535", "after"]


def test_repeated_multiplication_wraps_instead_of_failing(program):
	source = program(
		"long x = 1;",
		"for (int i = 0; i < 400; i++) {",
		"    x = x * 10;",
		"}",
		"if (x > 5) {",
		'    System.out.println("big");',
		"}",
		"System.out.println(x);",
	)
	assert _output(source) == ["0"]


def test_compound_condition_warns_and_is_false(program):
	source = program(
		"int a = 2;",
		"if (a > 1 && a < 5) {",
		'    System.out.println("inside");',
		"}",
		'System.out.println("after");',
	)
	result = interpret(source)
	assert result.success
	assert result.output == ["[Error evaluating: a > 1 && a < 5]", "after"]
	(warning,) = result.warnings
	assert warning.line == 4
	assert "&&" in warning.message


def test_if_else_if_chain(program):
	def run(x):
		return _output(program(
			f"int x = {x};",
			"if (x > 10) {",
			'    System.out.println("big");',
			"} else if (x > 3) {",
			'    System.out.println("medium");',
			"} else {",
			'    System.out.println("small");',
			"}",
			'System.out.println("done");',
		))

	assert run(20) == ["big", "done"]
	assert run(5) == ["medium", "done"]
	assert run(1) == ["small", "done"]


def test_else_on_its_own_line(program):
	source = program(
		"int x = 1;",
		"if (x > 10) {",
		'    System.out.println("big");',
		"}",
		"else {",
		'    System.out.println("small");',
		"}",
	)
	assert _output(source) == ["small"]


def test_single_line_if_else_chain(program):
	source = program(
		"int score = 75;",
		"char grade;",
		"if (score >= 90) grade = 'A';",
		"else if (score >= 70) grade = 'C';",
		"else grade = 'F';",
		"System.out.println(grade);",
	)
	assert _output(source) == ["C"]


def test_nested_if_leaves_the_outer_else_alone(program):
	source = program(
		"boolean a = true;",
		"boolean b = false;",
		"if (a) {",
		"    if (b) {",
		'        System.out.println("inner");',
		"    }",
		"} else {",
		'    System.out.println("outer-else");',
		"}",
		'System.out.println("end");',
	)
	assert _output(source) == ["end"]


def test_nested_braceless_if_leaves_the_outer_else_alone(program):
	source = program(
		"int x = 1;",
		"if (x > 0) {",
		'    if (x > 5) System.out.println("inner");',
		"} else {",
		'    System.out.println("outer-else");',
		"}",
		'System.out.println("end");',
	)
	assert _output(source) == ["end"]


def test_if_else_on_one_line(program):
	def run(x):
		return _output(program(
			f"int x = {x};",
			'if (x > 5) { System.out.println("big"); } else { System.out.println("small"); }',
			'System.out.println("done");',
		))

	assert run(0) == ["small", "done"]
	assert run(9) == ["big", "done"]


def test_else_if_chain_on_one_line(program):
	def run(x):
		return _output(program(
			f"int x = {x};",
			'if (x > 5) { System.out.println("big"); } else if (x > 0) { System.out.println("some"); } else { System.out.println("none"); }',
		))

	assert run(9) == ["big"]
	assert run(3) == ["some"]
	assert run(0) == ["none"]


def test_braceless_if_else_on_one_line(program):
	source = program(
		"int x = 0;",
		'if (x > 5) System.out.println("big"); else System.out.println("small");',
	)
	assert _output(source) == ["small"]


def test_one_line_else_opening_a_block(program):
	source = program(
		"int x = 0;",
		'if (x > 5) { System.out.println("big"); } else {',
		'    System.out.println("small");',
		"}",
		'System.out.println("done");',
	)
	assert _output(source) == ["small", "done"]


def test_if_else_inside_an_inline_loop_body(program):
	source = program(
		'for (int i = 0; i < 3; i++) { if (i == 1) System.out.print("x"); else System.out.print(i); }',
		"System.out.println();",
	)
	assert _output(source) == ["0x2"]


def test_equality_compares_rendered_values(program):
	source = program(
		"double d = 5;",
		"int n = 5;",
		"if (d == n) {",
		'    System.out.println("same");',
		"} else {",
		'    System.out.println("different");',
		"}",
		"if (d >= n) {",
		'    System.out.println("not less");',
		"}",
	)
	assert _output(source) == ["different", "not less"]


def test_while_with_braceless_body(program):
	source = program("int k = 3;", "while (k > 0)", "    k--;", "System.out.println(k);")
	assert _output(source) == ["0"]


def test_inline_for_loop(program):
	source = program("for (int i = 0; i < 3; i++) System.out.print(i);", "System.out.println();")
	assert _output(source) == ["012"]


def test_nested_loops_are_fully_interpreted(program):
	source = program(
		"int total = 0;",
		"for (int i = 1; i <= 3; i++) {",
		"    for (int j = 1; j <= i; j++) {",
		"        total += j;",
		"    }",
		"}",
		"System.out.println(total);",
	)
	assert _output(source) == ["10"]


def test_print_only_bodies_reproduces_narrow_mode(program):
	source = program(
		"int total = 0;",
		"for (int i = 1; i <= 3; i++) {",
		"    total += i;",
		'    System.out.println("i");',
		"}",
		"System.out.println(total);",
	)
	assert _output(source) == ["i", "i", "i", "6"]
	assert _output(source, print_only_bodies=True) == ["i", "i", "i", "0"]


def test_break_and_continue(program):
	source = program(
		"for (int i = 1; i <= 5; i++) {",
		"    if (i == 2) continue;",
		"    if (i == 4) break;",
		"    System.out.println(i);",
		"}",
	)
	assert _output(source) == ["1", "3"]


def test_switch_falls_through_until_break(program):
	def run(day):
		return _output(program(
			f"int day = {day};",
			"switch (day) {",
			"    case 1:",
			'        System.out.println("Mon");',
			"        break;",
			"    case 2:",
			'        System.out.println("Tue");',
			"    case 3:",
			'        System.out.println("Wed");',
			"        break;",
			"    default:",
			'        System.out.println("Other");',
			"}",
		))

	assert run(1) == ["Mon"]
	assert run(2) == ["Tue", "Wed"]
	assert run(9) == ["Other"]


def test_switch_on_strings_with_inline_cases(program):
	source = program(
		'String cmd = "go";',
		"switch (cmd) {",
		'    case "stop": System.out.println("halt"); break;',
		'    case "go": System.out.println("run"); break;',
		"}",
	)
	assert _output(source) == ["run"]


def test_return_ends_the_run(program):
	source = program('System.out.println("a");', "return;", 'System.out.println("b");')
	assert _output(source) == ["a"]


def test_other_method_bodies_are_skipped():
	source = "\n".join([
		"public class Main {",
		"    static int helper(int x) {",
		'        System.out.println("inside");',
		"        return x;",
		"    }",
		"    public static void main(String[] args) {",
		'        System.out.println("main");',
		"    }",
		"}",
	])
	assert _output(source) == ["main"]


def test_enhanced_for_is_skipped_with_a_warning(program):
	source = program("int[] xs = {1, 2};", "for (int x : xs) {", "    System.out.println(x);", "}")
	result = interpret(source)
	assert result.success
	assert result.output == []
	assert "Enhanced for loops" in result.warnings[0].message


def test_stats_count_variables_and_prints(program):
	result = interpret(program("int a = 1;", "double b = 2;", "System.out.println(a + b);"))
	assert result.output == ["3.0"]
	assert result.stats.variables == 2
	assert result.stats.prints == 1
	assert result.stats.lines == 7


# ---------------------------------------------------------------------------
# Bundled example programs


def test_basic_example():
	assert _output(EXAMPLES["basic"]) == ["Hello, World!", "Welcome to Java Programming!"]


def test_default_example():
	output = _output(EXAMPLES["default"])
	assert "15.0 + 7.0 = 22.0" in output
	assert "15.0 / 7.0 = 2.142857142857143" in output
	assert output[-6:-2] == ["Count: 2", "Count: 3", "Count: 4", "Count: 5"]


def test_calculator_example():
	output = _output(EXAMPLES["calculator"])
	assert output[-1] == "25.0 + 5.0 = 30.0"
	assert "Invalid choice!" not in output


def test_patterns_example():
	output = _output(EXAMPLES["patterns"])
	assert "* * * * * " in output
	assert "   *" in output
	assert "*******" in output
	assert "1 2 3 4 5 " in output


def test_loops_example_keeps_going_past_unsupported_parts():
	result = interpret(EXAMPLES["loops"])
	assert result.success
	assert result.output[-5:] == ["Countdown: 5", "Countdown: 4", "Countdown: 3", "Countdown: 2", "Countdown: 1"]
	assert any("Enhanced for loops" in d.message for d in result.warnings)


# ---------------------------------------------------------------------------
# Configuration and sink


def test_config_from_env():
	config = SimulationConfig.from_env({"QUICKJAVA_MAX_ITERATIONS": "50", "QUICKJAVA_PRINT_ONLY_BODIES": "yes"})
	assert config.max_iterations == 50
	assert config.print_only_bodies
	assert config.compile_delay_ms == 0
	assert config.entry_class == "Main"


def test_config_from_env_rejects_bad_numbers():
	with pytest.raises(ValueError):
		SimulationConfig.from_env({"QUICKJAVA_MAX_ITERATIONS": "many"})


def test_output_sink():
	sink = OutputSink()
	sink.write("a")
	sink.writeln("b")
	sink.write("x\ny")
	sink.flush()
	assert sink.records == ["ab", "x", "y"]
