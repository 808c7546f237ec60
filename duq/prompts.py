"""Prompt templates — one function per command, pure string formatting."""

from __future__ import annotations

from pathlib import Path

_LANGUAGES: dict[str, str] = {
    ".js": "JavaScript/TypeScript",
    ".jsx": "JavaScript/TypeScript",
    ".ts": "JavaScript/TypeScript",
    ".tsx": "JavaScript/TypeScript",
    ".py": "Python",
    ".java": "Java",
    ".rb": "Ruby",
    ".go": "Go",
    ".php": "PHP",
    ".c": "C/C++",
    ".cpp": "C/C++",
    ".h": "C/C++",
    ".hpp": "C/C++",
    ".cs": "C#",
    ".swift": "Swift",
    ".rs": "Rust",
}

NO_FOLLOW_UP = "Don't ask any follow-up questions."


def detect_language(file_path: str | Path) -> str:
    return _LANGUAGES.get(Path(file_path).suffix.lower(), "Unknown")


def default_readme_path(dir_path: str | Path) -> Path:
    return Path(dir_path) / "README.md"


def default_test_path(file_path: str | Path) -> Path:
    """``src/app.js`` → ``src/app.test.js``"""
    path = Path(file_path)
    return path.with_name(f"{path.stem}.test{path.suffix}")


def document(dir_path: str | Path, output_path: str | Path | None = None) -> str:
    readme = output_path or default_readme_path(dir_path)
    return f"""
Create a README.md for this project directory: {dir_path}
Include: project name, description, installation, usage, structure, and dependencies.
Format as markdown inside a single ```markdown code block.
{NO_FOLLOW_UP}
The README.md will be saved to: {readme}
"""


def explain(file_path: str | Path) -> str:
    return f"""
Explain this code file: {file_path}
Include what it does, key functions, patterns used, and potential improvements.
{NO_FOLLOW_UP}
"""


def refactor(file_path: str | Path) -> str:
    return f"""
Suggest refactoring improvements for: {file_path}
{NO_FOLLOW_UP}
Focus on code quality, performance, best practices, and potential bugs.
Provide specific code examples.
"""


def test(file_path: str | Path, output_path: str | Path | None = None) -> str:
    test_file = output_path or default_test_path(file_path)
    return f"""
Generate test cases for: {file_path}
Include unit tests, edge cases, mocks where needed, and follow best practices.
Provide complete test code ready to implement, in a single code block.
{NO_FOLLOW_UP}
The test file will be saved to: {test_file}
"""


def docstrings(file_path: str | Path) -> str:
    return f"""
Add appropriate docstrings/comments to this code file: {file_path}
{NO_FOLLOW_UP}
Language: {detect_language(file_path)}
Guidelines:
1. Use the standard documentation format for the language (JSDoc for JavaScript, docstrings for Python, etc.)
2. Document parameters, return values, and exceptions/errors
3. Include a brief description of what each function/class/method does
4. Don't modify the actual implementation code
5. Preserve existing documentation if it's already present
6. Return the complete file with added documentation in a single code block
"""


def security(target_path: str | Path, is_directory: bool) -> str:
    subject = "the codebase in directory" if is_directory else "the file"
    return f"""
Perform a comprehensive security analysis of {subject}: {target_path}
{NO_FOLLOW_UP}
Focus on identifying:
1. Potential security vulnerabilities (OWASP Top 10 for web applications)
2. Insecure coding patterns
3. Input validation issues
4. Authentication/authorization flaws
5. Data exposure risks
6. Injection vulnerabilities (SQL, NoSQL, command, etc.)
7. Cross-site scripting (XSS) possibilities
8. Hardcoded secrets or credentials
9. Insecure dependencies or configurations
10. Cryptographic issues

For each finding:
- Describe the vulnerability
- Rate its severity (Critical, High, Medium, Low)
- Explain the potential impact
- Provide a code example showing how to fix it
- Include references to security best practices

Format the output as markdown with clear sections and code blocks.
"""
