"""
Default templates for the essential Sandpack project files.

These templates provide working default content when the LLM response lacks
one of the files a Sandpack preview needs.

Used by:
- FileRepairer (canonical entry-point bootstrap)
- ProjectScaffolder (missing essential files, broken manifest, App built from raw text)
"""

import json
from typing import Dict, Optional

# Pinned versions written into synthesized manifests
REACT_VERSION = "^18.2.0"
REACT_DOM_VERSION = "^18.2.0"

FRAMEWORK_IMPORT = "import React from 'react';"

ROOT_ELEMENT_ID = "root"

TAILWIND_CDN_URL = "https://cdn.tailwindcss.com"


def default_manifest(name: str = "sandpack-app") -> str:
    """package.json declaring React and ReactDOM at the pinned versions"""
    return json.dumps({
        "name": name,
        "version": "1.0.0",
        "main": "src/index.js",
        "dependencies": {
            "react": REACT_VERSION,
            "react-dom": REACT_DOM_VERSION,
        },
    }, indent=2)


INDEX_HTML = f"""<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <script src="{TAILWIND_CDN_URL}"></script>
    <title>React App</title>
  </head>
  <body>
    <div id="{ROOT_ELEMENT_ID}"></div>
  </body>
</html>"""

INDEX_CSS = """@tailwind base;
@tailwind components;
@tailwind utilities;

* {
  margin: 0;
  padding: 0;
  box-sizing: border-box;
}

body {
  font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', 'Roboto', 'Oxygen',
    'Ubuntu', 'Cantarell', 'Fira Sans', 'Droid Sans', 'Helvetica Neue',
    sans-serif;
  -webkit-font-smoothing: antialiased;
  -moz-osx-font-smoothing: grayscale;
}

html, body, #root {
  height: 100%;
  width: 100%;
}"""

# Canonical entry point: React 18 root API mounted on #root
ENTRY_BOOTSTRAP = f"""{FRAMEWORK_IMPORT}
import ReactDOM from 'react-dom/client';
import App from './App';
import './index.css';

const root = ReactDOM.createRoot(document.getElementById('{ROOT_ELEMENT_ID}'));
root.render(
  <React.StrictMode>
    <App />
  </React.StrictMode>
);"""

APP_COMPONENT = f"""{FRAMEWORK_IMPORT}

export default function App() {{
  return (
    <div className="min-h-screen bg-gradient-to-br from-blue-50 to-indigo-100 p-8">
      <div className="max-w-4xl mx-auto">
        <h1 className="text-4xl font-bold text-gray-900 mb-4">Welcome to Your React App</h1>
        <p className="text-lg text-gray-700">Start editing to see your app live!</p>
      </div>
    </div>
  );
}}"""


def prose_app(excerpt: str) -> str:
    """Placeholder App that displays text a model returned instead of code"""
    # Text goes in as a JS string literal, never as JSX markup
    text = json.dumps(excerpt, ensure_ascii=False)
    return f"""{FRAMEWORK_IMPORT}

export default function App() {{
  return (
    <div className="min-h-screen bg-gradient-to-br from-blue-50 to-indigo-100 p-8">
      <div className="max-w-4xl mx-auto">
        <h1 className="text-4xl font-bold text-gray-900 mb-4">React App</h1>
        <div className="bg-white rounded-lg shadow-lg p-6">
          <p className="text-lg text-gray-700">{{{text}}}</p>
        </div>
      </div>
    </div>
  );
}}"""


# Essential file key -> (default path, content)
SANDPACK_TEMPLATES: Dict[str, Dict[str, str]] = {
    "package.json": {"path": "/package.json", "content": default_manifest()},
    "public/index.html": {"path": "/public/index.html", "content": INDEX_HTML},
    "src/index.css": {"path": "/src/index.css", "content": INDEX_CSS},
    "src/index.js": {"path": "/src/index.js", "content": ENTRY_BOOTSTRAP},
    "src/App.js": {"path": "/src/App.js", "content": APP_COMPONENT},
}


def get_template(name: str) -> Optional[Dict[str, str]]:
    """
    Get the default template for an essential file.

    Args:
        name: Essential file key (e.g., "package.json", "src/App.js")

    Returns:
        Dict with "path" and "content", or None if no template available
    """
    template = SANDPACK_TEMPLATES.get(name.lstrip("/"))
    return dict(template) if template else None


def get_all_essential_files() -> Dict[str, str]:
    """
    Get all essential file templates.

    Returns:
        Dict mapping file paths to content, in scaffolding order
    """
    return {t["path"]: t["content"] for t in SANDPACK_TEMPLATES.values()}
