"""
Standalone HTML documents for the live preview of code blocks.

The documents are meant for a sandboxed iframe (``allow-scripts`` only).
"""
import re
from typing import Optional

PREVIEWABLE_LANGUAGES = ("html", "css", "javascript", "js", "jsx", "tsx", "react")

COMPONENT_RE = re.compile(r"(?:function|const|class)\s+(\w+)")

CSS_TEMPLATE = """<!DOCTYPE html>
<html>
<head><style>{code}</style></head>
<body><div class="preview">CSS Preview - Add HTML to see styles</div></body>
</html>"""

SCRIPT_TEMPLATE = """<!DOCTYPE html>
<html>
<head></head>
<body>
<div id="output"></div>
<script>
const originalLog = console.log;
console.log = (...args) => {{
  const output = document.getElementById('output');
  output.innerHTML += args.map(a => typeof a === 'object' ? JSON.stringify(a, null, 2) : a).join(' ') + '<br>';
  originalLog(...args);
}};
try {{
{code}
}} catch(e) {{
  document.getElementById('output').innerHTML = '<span style="color:red">Error: ' + e.message + '</span>';
}}
</script>
</body>
</html>"""

REACT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<script src="https://unpkg.com/react@18/umd/react.development.js"></script>
<script src="https://unpkg.com/react-dom@18/umd/react-dom.development.js"></script>
<script src="https://unpkg.com/@babel/standalone/babel.min.js"></script>
<style>body {{ font-family: system-ui, sans-serif; padding: 16px; }}</style>
</head>
<body>
<div id="root"></div>
<script type="text/babel">
{code}
const rootElement = document.getElementById('root');
const root = ReactDOM.createRoot(rootElement);
try {{
{render}
}} catch(e) {{
  rootElement.innerHTML = '<span style="color:red">Error: ' + e.message + '</span>';
}}
</script>
</body>
</html>"""


def is_previewable(language: Optional[str]) -> bool:
    return bool(language) and language.lower() in PREVIEWABLE_LANGUAGES


def component_name(code: str) -> Optional[str]:
    """First declared function, const or class, taken as the component to render"""
    match = COMPONENT_RE.search(code)
    return match.group(1) if match else None


def build_preview(code: str, language: Optional[str]) -> str:
    lang = (language or "").lower()

    if lang == "html":
        return code

    if lang == "css":
        return CSS_TEMPLATE.format(code=code)

    if lang in ("javascript", "js"):
        return SCRIPT_TEMPLATE.format(code=code)

    if lang in ("jsx", "tsx", "react"):
        name = component_name(code)
        render = ""
        if name:
            render = (
                f"  if (typeof {name} === 'function') {{\n"
                f"    root.render(React.createElement({name}));\n"
                f"  }}"
            )
        return REACT_TEMPLATE.format(code=code, render=render)

    return code
