from textwrap import dedent

import pytest

from maskcheck.deprecation import is_deprecated_override, replacement_of, split_qualified
from maskcheck.errors import DesignViolationError
from maskcheck.model import Binding


def binding(source, name="foo", scope="B"):
	return Binding(name=name, scope=scope, source=dedent(source))


def test_no_marker():
	assert replacement_of(binding("function(x) x")) is None


def test_positional_replacement():
	assert replacement_of(binding('.Deprecated("A::foo")')) == "A::foo"


def test_marker_spanning_lines():
	source = """
	function(x) {
	  .Deprecated(
	    new = "A::foo",
	    package = "B"
	  )
	}
	"""
	assert replacement_of(binding(source)) == "A::foo"


def test_python_decorator_marker():
	source = """
	@deprecated("pkg.tools.foo")
	def foo(x):
	    return x
	"""
	assert replacement_of(binding(source)) == "pkg.tools.foo"


def test_non_literal_replacement_fails():
	with pytest.raises(DesignViolationError) as info:
		replacement_of(binding(".Deprecated(new = replacement)"))
	assert info.value.binding == "foo"


def test_split_qualified():
	assert split_qualified("A::foo") == ("A", "foo")
	assert split_qualified("A:::foo") == ("A", "foo")
	assert split_qualified("pkg.tools.foo") == ("pkg.tools", "foo")
	assert split_qualified("foo") == (None, "foo")


def test_override_accepts_package_prefixed_scopes():
	b = binding('.Deprecated("A::foo")', scope="package:B")
	assert is_deprecated_override(b, {"package:A": 0, "package:B": 1})
	assert not is_deprecated_override(b, {"package:B": 0, "package:A": 1})
	assert not is_deprecated_override(b, {"package:B": 0})


def test_marker_inside_one_line_body():
	assert replacement_of(binding('function(x) { .Deprecated("A::foo"); x }')) == "A::foo"


def test_marker_with_parenthesis_inside_string():
	assert replacement_of(binding('.Deprecated("A::foo", msg = "use foo() (new)") ; x')) == "A::foo"


def test_name_ending_in_marker_word_is_not_a_marker():
	assert replacement_of(binding('function(x) notDeprecated("A::foo")')) is None


def test_unclosed_marker_fails():
	with pytest.raises(DesignViolationError):
		replacement_of(binding('.Deprecated("A::foo"'))
