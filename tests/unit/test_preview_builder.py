import pytest

from tvog.modules.preview.builder import build_preview, component_name, is_previewable


@pytest.mark.parametrize("language", ["html", "CSS", "javascript", "js", "jsx", "tsx", "React"])
def test_previewable_languages(language: str) -> None:
    assert is_previewable(language)


@pytest.mark.parametrize("language", ["python", "code", "", None])
def test_not_previewable(language) -> None:
    assert not is_previewable(language)


def test_html_is_returned_verbatim() -> None:
    assert build_preview("<p>hi</p>", "html") == "<p>hi</p>"


def test_css_is_wrapped_in_style() -> None:
    doc = build_preview("body { color: red; }", "css")
    assert "<style>body { color: red; }</style>" in doc
    assert "CSS Preview" in doc


def test_javascript_captures_console_log() -> None:
    doc = build_preview("console.log(1 + 1)", "js")
    assert "console.log = (...args) => {" in doc
    assert "try {\nconsole.log(1 + 1)\n}" in doc


def test_react_renders_first_component() -> None:
    code = "function Counter() { return <div>0</div>; }"
    doc = build_preview(code, "jsx")
    assert component_name(code) == "Counter"
    assert "root.render(React.createElement(Counter));" in doc
    assert "react@18" in doc


def test_other_language_returns_code() -> None:
    assert build_preview("x = 1", "python") == "x = 1"
