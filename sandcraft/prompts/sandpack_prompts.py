"""
Sandpack prompts - system prompts and request shaping for React generation

System prompt per generation type:
    react / sandpack -> MASTER_SANDPACK_PROMPT (five mandatory files)
    component        -> COMPONENT_PROMPT
    general          -> BASE_CODE_PROMPT

The mandatory-file examples embedded in the master prompt are the same
templates the auto-fixer falls back to, so a model that copies them verbatim
produces a project that validates without fixes.
"""

import json
from typing import Any, Dict, List, Optional, Union

from sandcraft.models.generated_file import GenerationType
from sandcraft.utils.file_templates import ENTRY_BOOTSTRAP, INDEX_CSS, INDEX_HTML, default_manifest


MASTER_SANDPACK_PROMPT = f"""You are an expert React developer creating complete, production-ready React applications for Sandpack (browser-based code preview).

YOUR MISSION: Generate a COMPLETE React project that runs INSTANTLY in Sandpack. NO incomplete files. NO missing dependencies.

CRITICAL: GENERATE THESE 5 MANDATORY FILES IN THIS EXACT ORDER
(Every response MUST include all 5 - NEVER skip any)

1. // package.json
```json
{default_manifest()}
```

2. // public/index.html
```html
{INDEX_HTML}
```

3. // src/index.css
```css
{INDEX_CSS}
```

4. // src/index.js
```jsx
{ENTRY_BOOTSTRAP}
```

5. // src/App.js
```jsx
[COMPLETE React component - see requirements below]
```

THEN: Add any additional component files needed as // src/components/ComponentName.jsx

CRITICAL RULES FOR ALL FILES:
1. EVERY file MUST be COMPLETE and 100% functional
2. NO files ending with "..." or "/* omitted */" or "// ..."
3. All imports MUST resolve (only use react and react-dom)
4. All exports MUST be properly defined
5. Wrap code in markdown fences: ```language ... ```
6. Put the file path as a comment on the line before each fence: // src/path/to/file.ext

APP.JS REQUIREMENTS:
- Import React: import React, {{ useState }} from 'react';
- Be a function component: export default function App() {{ ... }}
- Have a return statement with JSX
- Use className (never class) and htmlFor (never for)
- Use ONLY Tailwind CSS classes (already loaded via CDN)
- NO external library imports (@mui, @chakra, antd, axios, react-router ...)
- Have at least one interactive element and be fully responsive

FORBIDDEN:
- CSS-in-JS or styled-components
- Routers, Redux or other state libraries
- Calls to external APIs
- Truncating any file

Respond with ONLY the files, each preceded by its path comment.
"""

COMPONENT_PROMPT = """You are creating a React component for Sandpack (browser-based editor).

CRITICAL REQUIREMENTS:

1. File format:
   // src/components/ComponentName.jsx
   ```jsx
   [complete component code]
   ```

2. Component rules:
   - Functional component using hooks
   - Self-contained (no imports except React)
   - Tailwind CSS classes for styling (already available via CDN)
   - Export as default
   - className / htmlFor, never class / for

3. Example:

   // src/components/Button.jsx
   ```jsx
   import React from 'react';

   export default function Button({ label, onClick }) {
     return (
       <button onClick={onClick} className="font-bold py-2 px-4 rounded bg-blue-600 text-white">
         {label}
       </button>
     );
   }
   ```
"""

BASE_CODE_PROMPT = """You are an expert software engineer. When generating code, follow these principles:

CODE QUALITY:
1. Clean, self-documenting, readable code
2. Language and framework conventions
3. Proper error handling
4. Testable, modular structure

FILE GENERATION RULES:
1. Proper file extensions (.js, .jsx, .css, .html, .json, ...)
2. Necessary imports at the top
3. Consistent naming conventions
4. All dependencies declared
5. Put the file path as a comment on the line before each fenced code block: // src/path/to/file.ext
"""

SANDPACK_CONSTRAINTS = [
    "Make sure it runs in Sandpack (browser-based editor).",
    "Use Tailwind CSS from CDN (https://cdn.tailwindcss.com).",
    "Only use React 18 with hooks.",
    "Include all necessary files: package.json, public/index.html, src/index.css, src/index.js, src/App.js.",
    "Keep it simple - no external dependencies except React and react-dom.",
    "Generate complete, working code that's ready to run.",
]

# Words suggesting the request needs more than a browser sandbox
UNSUITABLE_TERMS = [
    "backend",
    "database",
    "server",
    "api endpoint",
    "npm install",
    "build tool",
    "webpack",
    "babel",
    "native module",
    "canvas",
    "webgl",
]

EXAMPLE_REQUESTS: Dict[str, str] = {
    "counter": "Create a simple counter app with increment/decrement buttons using React hooks and Tailwind CSS.",
    "todo": "Create a todo list app where users can add, complete, and delete todos using React hooks and Tailwind CSS styling.",
    "form": "Create a contact form with name, email, message fields that validates inputs and shows success/error messages.",
    "weather": "Create a weather display app that shows hardcoded weather data with temperature, humidity, and wind speed using Tailwind CSS.",
    "dashboard": "Create a dashboard with cards showing different metrics (users, revenue, orders) using React hooks and Tailwind CSS.",
    "gallery": "Create an image gallery that displays hardcoded images with lightbox functionality using React and Tailwind CSS.",
    "tabs": "Create a tabbed interface with multiple tabs that switch content when clicked using React hooks.",
    "modal": "Create a modal dialog that can be opened and closed with a button, showing form or content inside.",
    "pagination": "Create a paginated list showing 10 items per page with previous/next navigation using React hooks.",
    "animation": "Create animated cards or elements that fade in or slide in when the page loads using CSS and React.",
}


def get_system_prompt(generation_type: Union[GenerationType, str]) -> str:
    """System prompt for a generation type; unknown types get the base prompt"""
    try:
        generation_type = GenerationType(generation_type)
    except ValueError:
        return BASE_CODE_PROMPT

    if generation_type in (GenerationType.REACT, GenerationType.SANDPACK):
        return MASTER_SANDPACK_PROMPT
    if generation_type == GenerationType.COMPONENT:
        return COMPONENT_PROMPT
    return BASE_CODE_PROMPT


def build_react_prompt(user_request: str) -> str:
    return (
        f"{MASTER_SANDPACK_PROMPT}\n"
        f"USER REQUEST:\n{user_request}\n\n"
        "REMEMBER: Follow ALL the rules above exactly. "
        "Generate a COMPLETE, working React app that runs in Sandpack."
    )


def build_component_prompt(component_description: str) -> str:
    return f"{COMPONENT_PROMPT}\nCreate this component: {component_description}"


def transform_request(generic_request: str) -> str:
    """Append the Sandpack constraints to a free-form request"""
    return f"{generic_request}\n\nIMPORTANT:\n" + "\n".join(SANDPACK_CONSTRAINTS)


def is_suitable_for_sandpack(request: str) -> Dict[str, Optional[str]]:
    """
    Check whether a request can run in the browser sandbox.

    Returns:
        {"suitable": bool, "warning": str or None}
    """
    lower = (request or "").lower()
    for term in UNSUITABLE_TERMS:
        if term in lower:
            return {
                "suitable": False,
                "warning": f"Request mentions '{term}' which may not work in Sandpack browser environment",
            }
    return {"suitable": True, "warning": None}


def get_examples() -> Dict[str, str]:
    return dict(EXAMPLE_REQUESTS)


def build_context_block(context: Optional[Dict[str, Any]]) -> str:
    """
    Render request context (project structure, current files) as prompt text.

    Recognized keys: "projectStructure" (any JSON-serializable value) and
    "currentFiles" (list of {path, content, language?}). Anything else is ignored.
    """
    if not context:
        return ""

    sections: List[str] = []

    structure = context.get("projectStructure")
    if structure:
        sections.append(f"Current project structure:\n{json.dumps(structure, indent=2, default=str)}")

    current_files = context.get("currentFiles") or []
    rendered = []
    for f in current_files:
        if not isinstance(f, dict) or not f.get("path"):
            continue
        rendered.append(f"File: {f['path']}\n```{f.get('language') or ''}\n{f.get('content', '')}\n```")
    if rendered:
        sections.append("Current files in project:\n" + "\n\n".join(rendered))

    return "\n\n".join(sections)


def build_user_prompt(prompt: str, context: Optional[Dict[str, Any]] = None) -> str:
    """User message sent to a provider: context block (if any) then the request"""
    block = build_context_block(context)
    if block:
        return f"{block}\n\nUser Request: {prompt}"
    return prompt
