"""Built-in example snippets offered next to the playground editor."""

from __future__ import annotations

from .schemas import Example

EXAMPLES: tuple[Example, ...] = (
    Example(
        title="Array map",
        language="javascript",
        code="const numbers = [1, 2, 3];\nconst doubled = numbers.map(n => n * 2);\nconsole.log(doubled);",
    ),
    Example(
        title="Fetch data",
        language="javascript",
        code=(
            "async function load() {\n"
            "  const response = await fetch('https://jsonplaceholder.typicode.com/todos/1');\n"
            "  const data = await response.json();\n"
            "  console.log(data);\n"
            "}\n"
            "\n"
            "load();"
        ),
    ),
    Example(
        title="TypeScript types",
        language="typescript",
        code=(
            "type User = { name: string; age: number };\n"
            "const user: User = { name: 'Ada', age: 36 };\n"
            "console.log(user);"
        ),
    ),
)


def list_examples() -> list[Example]:
    return list(EXAMPLES)


def get_example(title: str) -> Example:
    for example in EXAMPLES:
        if example.title == title:
            return example
    raise KeyError(f"Unknown example: {title}")
