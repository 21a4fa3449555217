from maskcheck.filters import (
	PYTHON,
	R,
	apply_stages,
	detect_dialect,
	drop_empty,
	number_lines,
	strip_docstrings,
	strip_comments,
	strip_field_access,
	strip_named_arguments,
	strip_qualified,
	strip_strings,
)


def test_strip_comments():
	lines = strip_comments([(1, "x <- foo(1) # foo is great")], R)
	assert lines == [(1, "x <- foo(1) ")]


def test_strip_strings_single_and_double():
	lines = strip_strings([(1, "paste('foo', \"foo bar\")")], R)
	assert lines == [(1, "paste(, )")]


def test_unbalanced_quote_is_kept():
	lines = strip_strings([(1, "foo('x)")], R)
	assert lines == [(1, "foo('x)")]


def test_strip_named_arguments_keeps_values():
	lines = strip_named_arguments([(1, "f(x = foo, n=3)")], R)
	assert lines == [(1, "f( foo, 3)")]


def test_comparison_is_not_a_named_argument():
	lines = strip_named_arguments([(1, "if (x == foo) y")], R)
	assert lines == [(1, "if (x == foo) y")]


def test_strip_field_access():
	assert strip_field_access([(1, "df$foo + 1")], R) == [(1, "df + 1")]
	# Python has no $ field access.
	assert strip_field_access([(1, "df$foo")], PYTHON) == [(1, "df$foo")]


def test_drop_empty_keeps_numbering():
	lines = drop_empty(number_lines(["a", "  ", "", "b"]), R)
	assert lines == [(1, "a"), (4, "b")]


def test_strip_qualified():
	assert strip_qualified([(1, "A::foo(1) + foo(2)")], R) == [(1, "(1) + foo(2)")]
	assert strip_qualified([(1, "stats:::`foo`(1)")], R) == [(1, "(1)")]
	assert strip_qualified([(1, "np.sum(x) + sum(x)")], PYTHON) == [(1, "(x) + sum(x)")]


def test_apply_stages_order():
	lines = apply_stages(
		number_lines(["# only a comment", "gsub('#', '', foo(text))", "y <- df$col"]),
		R,
	)
	# Comments are stripped before strings, so a quoted # cuts the line.
	assert lines == [(2, "gsub('"), (3, "y <- df")]


def test_detect_dialect():
	assert detect_dialect("analysis.R", "python") == "r"
	assert detect_dialect("report.Rmd", "python") == "r"
	assert detect_dialect("tool.py", "r") == "python"
	assert detect_dialect("notes.txt", "r") == "r"


def test_strip_docstrings_spanning_lines():
	lines = number_lines(['def f(x):', '    """Call foo', '    on x."""', '    return foo(x)'])
	assert strip_docstrings(lines, PYTHON) == [
		(1, "def f(x):"),
		(2, "    "),
		(3, ""),
		(4, "    return foo(x)"),
	]


def test_strip_docstrings_on_one_line_and_other_quote():
	lines = [(1, "x = '''foo''' + bar()"), (2, '"""a \'\'\' b"""')]
	assert strip_docstrings(lines, PYTHON) == [(1, "x =  + bar()"), (2, "")]


def test_r_keeps_triple_quotes():
	lines = [(1, '"""foo"""')]
	assert strip_docstrings(lines, R) == lines
