"""A small demonstration tree.

Used by the REPL and the web UI when no tree document is supplied, so
``py-term`` has something to explore out of the box.
"""

from py_term.fs.filesystem import Directory, LinkFile, LinkTarget, TextFile


def sample_tree() -> Directory:
    """Return a fresh demonstration tree."""
    return Directory(
        {
            "about.txt": TextFile(
                "PyTerm emulates a shell over an in-memory filesystem.\n"
                "Try 'ls', 'cd docs', 'cat about.txt' or press Tab."
            ),
            "docs": Directory(
                {
                    "getting-started.txt": TextFile("Type 'help' to list the commands."),
                    "completion.txt": TextFile(
                        "Tab completes command names and paths. Press Tab again to cycle."
                    ),
                    "history.txt": TextFile("Up and Down recall previously submitted lines."),
                }
            ),
            "projects": Directory(
                {
                    "py-term": LinkFile(href="https://pypi.org/project/py-term/", label="py-term"),
                    "notes": Directory({"todo.txt": TextFile("- write more docs")}),
                }
            ),
            "links": Directory(
                {
                    "python": LinkFile(href="https://www.python.org"),
                    "docs": LinkFile(
                        href="https://docs.python.org/3/",
                        label="Python docs",
                        target=LinkTarget.SELF,
                    ),
                }
            ),
        }
    )
