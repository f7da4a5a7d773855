from quickjava import normalize_source
from webapp.blocks import BlockRange, locate_block, split_inline_else


def _lines(*texts):
	return normalize_source("\n".join(texts))


def test_brace_on_header_line():
	lines = _lines("if (x) {", "a = 1;", "}", "b = 2;")
	assert locate_block(lines, 0) == BlockRange(1, 2, 2)


def test_brace_on_next_line():
	lines = _lines("while (x)", "{", "a = 1;", "}")
	assert locate_block(lines, 0) == BlockRange(2, 3, 3)


def test_braceless_header_takes_next_code_line():
	lines = _lines("for (;;)", "// note", "a = 1;", "b = 2;")
	block = locate_block(lines, 0)
	assert block == BlockRange(2, 3, 2)
	assert len(block) == 1


def test_trailing_statement_is_inline_body():
	lines = _lines("if (x > 0) y = 1;", "z = 2;")
	block = locate_block(lines, 0, rest="y = 1;")
	assert block.is_inline
	assert block.inline == "y = 1;"
	assert block.closing == 0
	assert len(block) == 0


def test_braces_opening_and_closing_on_header_line():
	lines = _lines("if (x) { a = 1; }", "b = 2;")
	block = locate_block(lines, 0, rest="{ a = 1; }")
	assert block.inline == "a = 1;"
	assert block.closing == 0


def test_nested_bodies_use_per_line_depth():
	lines = _lines("for (;;) {", "if (y) {", "a = 1;", "}", "}", "b = 2;")
	assert locate_block(lines, 0) == BlockRange(1, 4, 4)
	assert locate_block(lines, 1) == BlockRange(2, 3, 3)


def test_braces_inside_literals_are_ignored():
	lines = _lines("if (x) {", 'System.out.println("}{");', "}")
	assert locate_block(lines, 0) == BlockRange(1, 2, 2)


def test_else_on_closing_line_ends_the_body():
	lines = _lines("if (x) {", "a = 1;", "} else {", "b = 2;", "}")
	assert locate_block(lines, 0) == BlockRange(1, 2, 2)
	assert locate_block(lines, 2, rest="{") == BlockRange(3, 4, 4)


def test_unterminated_body_runs_to_end():
	lines = _lines("while (x) {", "a = 1;", "b = 2;")
	assert locate_block(lines, 0) == BlockRange(1, 3, 3)


def test_depth_counts_from_the_rest_of_the_header():
	lines = _lines('if (x) { a = 1; } else {', "b = 2;", "}")
	assert locate_block(lines, 0, rest="{ a = 1; }").inline == "a = 1;"
	assert locate_block(lines, 0, rest="{") == BlockRange(1, 2, 2)


def test_split_inline_else():
	assert split_inline_else("{ a = 1; } else { b = 2; }") == ("{ a = 1; }", "{ b = 2; }")
	assert split_inline_else("a = 1; else if (y) b = 2;") == ("a = 1;", "if (y) b = 2;")
	assert split_inline_else("{ if (y) a = 1; else b = 2; }") == ("{ if (y) a = 1; else b = 2; }", None)
	assert split_inline_else('elsewhere = "else";') == ('elsewhere = "else";', None)
