"""Tests for requires_dist name extraction."""

from analysis.dependencies import extract_dependencies, parse_requirement_name


class TestParseRequirementName:
    """Single requirement strings."""

    def test_parenthesized_version(self):
        assert parse_requirement_name("numpy (>=1.19.0)") == "numpy"

    def test_extra_gated_is_rejected(self):
        assert parse_requirement_name("pytest; extra == 'test'") is None
        assert parse_requirement_name('sphinx ; extra=="docs"') is None

    def test_inline_operator(self):
        assert parse_requirement_name("requests>=2.0.0") == "requests"
        assert parse_requirement_name("attrs~=23.1") == "attrs"
        assert parse_requirement_name("six!=1.0") == "six"

    def test_extras_and_markers(self):
        assert parse_requirement_name("urllib3[socks]<3") == "urllib3"
        assert parse_requirement_name("typing_extensions;python_version<'3.10'") == "typing-extensions"

    def test_name_is_normalized(self):
        assert parse_requirement_name("Zope.Interface >= 5") == "zope-interface"

    def test_empty(self):
        assert parse_requirement_name("") is None
        assert parse_requirement_name(">=1.0") is None


class TestExtractDependencies:
    """Whole requires_dist lists."""

    def test_sorted_deduplicated_and_filtered(self):
        requires = [
            "urllib3<3,>=1.21.1",
            "idna<4,>=2.5",
            "charset_normalizer<4,>=2",
            "Charset-Normalizer",
            "PySocks!=1.5.7,>=1.5.6; extra == \"socks\"",
            "nose",
            "mkl",
        ]
        assert extract_dependencies(requires) == ["charset-normalizer", "idna", "urllib3"]

    def test_missing_metadata(self):
        assert extract_dependencies(None) == []
        assert extract_dependencies([]) == []
